"""
Mackerel agent plugin protocol.

mackerel-agent runs the plugin periodically and reads stdout:
- normally one `<key>\t<value>\t<epoch>` line per metric
- with MACKEREL_AGENT_PLUGIN_META set, a `# mackerel-agent-plugin` header
  followed by a JSON document describing the graphs
"""
from __future__ import annotations
import json
import logging
import sys
import time
from typing import Dict, Iterator, Optional, TextIO, Tuple

from mackerel_sendgrid.plugin.base import Graph, MetricsPlugin

log = logging.getLogger("mackerel_sendgrid.runner")

META_HEADER = "# mackerel-agent-plugin"


def _graph_key(prefix: str, group: str) -> str:
    return f"{prefix}.{group}" if prefix else group


def definitions_payload(plugin: MetricsPlugin) -> Dict[str, Dict[str, Graph]]:
    prefix = plugin.metric_key_prefix()
    graphs: Dict[str, Graph] = {}
    for group, graph in plugin.graph_definition().items():
        graphs[_graph_key(prefix, group)] = {
            "label": graph["label"],
            "unit": graph["unit"],
            "metrics": [
                {"name": m["name"], "label": m.get("label", ""), "stacked": bool(m.get("stacked", False))}
                for m in graph["metrics"]
            ],
        }
    return {"graphs": graphs}


def output_definitions(plugin: MetricsPlugin, out: TextIO) -> None:
    out.write(META_HEADER + "\n")
    out.write(json.dumps(definitions_payload(plugin)) + "\n")


def metric_lines(
    plugin: MetricsPlugin,
    values: Dict[str, float],
) -> Iterator[Tuple[str, float]]:
    """
    Yield (full metric key, value) pairs.

    Declared metrics come first in catalog order. Keys the catalog does not
    know are still reported, sorted, under the first graph group.
    """
    prefix = plugin.metric_key_prefix()
    seen: set[str] = set()
    first_group: Optional[str] = None

    for group, graph in plugin.graph_definition().items():
        if first_group is None:
            first_group = group
        key = _graph_key(prefix, group)
        for m in graph["metrics"]:
            name = m["name"]
            if name in values and name not in seen:
                seen.add(name)
                yield f"{key}.{name}", values[name]

    extra = sorted(k for k in values if k not in seen)
    if extra:
        log.debug("runner: %d metrics not in graph definition: %s", len(extra), ", ".join(extra))
    for name in extra:
        if first_group is None:
            yield _graph_key(prefix, name), values[name]
        else:
            yield f"{_graph_key(prefix, first_group)}.{name}", values[name]


def output_values(plugin: MetricsPlugin, out: TextIO, *, now: Optional[float] = None) -> int:
    """Fetch once and print the values. Returns the number of lines written."""
    values = plugin.fetch_metrics()
    epoch = int(now if now is not None else time.time())
    n = 0
    for key, value in metric_lines(plugin, values):
        out.write(f"{key}\t{value:f}\t{epoch}\n")
        n += 1
    return n


def run(plugin: MetricsPlugin, *, meta: bool = False, out: Optional[TextIO] = None) -> None:
    """
    Run one plugin cycle. Fetch errors propagate to the caller.
    """
    out = out or sys.stdout
    if meta:
        output_definitions(plugin, out)
        return
    n = output_values(plugin, out)
    log.debug("runner: wrote %d metric lines", n)


__all__ = ["META_HEADER", "definitions_payload", "output_definitions", "metric_lines", "output_values", "run"]

from __future__ import annotations
from typing import TypedDict, List, Dict, Protocol


UNIT_INTEGER = "integer"
UNIT_FLOAT = "float"


class Metric(TypedDict, total=False):
    name: str
    label: str
    stacked: bool  # False unless the graph should stack this series


class Graph(TypedDict):
    label: str
    unit: str
    metrics: List[Metric]


class MetricsPlugin(Protocol):
    def fetch_metrics(self) -> Dict[str, float]:
        """
        Collect the current values, keyed by metric name.

        An empty dict means the provider had nothing to report. Failures
        raise; implementations never return partial results.
        """
        ...

    def graph_definition(self) -> Dict[str, Graph]:
        """
        Describe the graph groups this plugin reports, keyed by group name.
        Must not do any I/O.
        """
        ...

    def metric_key_prefix(self) -> str:
        ...


def metric(name: str, label: str, *, stacked: bool = False) -> Metric:
    return {"name": name, "label": label, "stacked": stacked}


__all__ = ["UNIT_INTEGER", "UNIT_FLOAT", "Metric", "Graph", "MetricsPlugin", "metric"]

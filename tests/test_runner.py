import io
import json

import pytest

from conftest import Recorder, stats_body
from mackerel_sendgrid.core.errors import SendgridStatusError
from mackerel_sendgrid.plugin.runner import META_HEADER, metric_lines, output_values, run


def test_meta_output_describes_prefixed_graph(make_plugin):
    rec = Recorder()
    out = io.StringIO()
    run(make_plugin(rec, prefix="my sendgrid"), meta=True, out=out)

    header, payload, *rest = out.getvalue().split("\n")
    assert header == META_HEADER
    assert rest == [""]
    graphs = json.loads(payload)["graphs"]
    assert list(graphs) == ["my sendgrid.global"]
    g = graphs["my sendgrid.global"]
    assert g["label"] == "My Sendgrid"
    assert g["unit"] == "integer"
    assert len(g["metrics"]) == 15
    assert g["metrics"][6] == {"name": "opens", "label": "Opens", "stacked": False}
    # metadata never hits the API
    assert rec.requests == []


def test_values_output_line_format(make_plugin):
    rec = Recorder(body=stats_body({"stats": [{"metrics": {"opens": 42, "bounces": 3}}]}))
    out = io.StringIO()
    n = output_values(make_plugin(rec), out, now=1740700000)
    assert n == 2
    # catalog order: bounces before opens
    assert out.getvalue() == (
        "sendgrid.global.bounces\t3.000000\t1740700000\n"
        "sendgrid.global.opens\t42.000000\t1740700000\n"
    )


def test_unknown_metrics_pass_through_after_declared(make_plugin):
    rec = Recorder(body=stats_body({"stats": [{"metrics": {"zeta": 1, "clicks": 2, "alpha": 3}}]}))
    plugin = make_plugin(rec)
    keys = [k for k, _ in metric_lines(plugin, plugin.fetch_metrics())]
    assert keys == ["sendgrid.global.clicks", "sendgrid.global.alpha", "sendgrid.global.zeta"]


def test_empty_window_prints_nothing(make_plugin):
    out = io.StringIO()
    run(make_plugin(Recorder(body="[]")), out=out)
    assert out.getvalue() == ""


def test_fetch_errors_propagate(make_plugin):
    out = io.StringIO()
    with pytest.raises(SendgridStatusError):
        run(make_plugin(Recorder(status_code=401, body="unauthorized")), out=out)
    assert out.getvalue() == ""

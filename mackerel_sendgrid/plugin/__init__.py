from mackerel_sendgrid.plugin.base import Graph, Metric, MetricsPlugin, UNIT_INTEGER
from mackerel_sendgrid.plugin.sendgrid import SendgridPlugin
from mackerel_sendgrid.plugin.runner import run

__all__ = ["Graph", "Metric", "MetricsPlugin", "UNIT_INTEGER", "SendgridPlugin", "run"]

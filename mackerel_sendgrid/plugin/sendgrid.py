from __future__ import annotations
import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from mackerel_sendgrid import user_agent
from mackerel_sendgrid.core.errors import (
    SendgridConfigError,
    SendgridDecodeError,
    SendgridStatusError,
    SendgridTransportError,
)
from mackerel_sendgrid.core.settings import DEFAULT_METRIC_KEY_PREFIX
from mackerel_sendgrid.plugin.base import Graph, Metric, UNIT_INTEGER, metric
from mackerel_sendgrid.utils import format_stats_date, stats_window_date, title_case

log = logging.getLogger("mackerel_sendgrid.fetch")

ENDPOINT = "https://api.sendgrid.com/v3/stats"

GRAPH_GLOBAL = "global"

# Counters reported by the global stats endpoint, in display order
GLOBAL_METRICS: tuple[Metric, ...] = (
    metric("bounce_drops", "BounceDrops"),
    metric("bounces", "Bounces"),
    metric("clicks", "Clicks"),
    metric("deferred", "Deferred"),
    metric("delivered", "Delivered"),
    metric("invalid_emails", "InvalidEmails"),
    metric("opens", "Opens"),
    metric("processed", "Processed"),
    metric("requests", "Requests"),
    metric("spam_report_drops", "SpamReportDrops"),
    metric("spam_reports", "SpamReports"),
    metric("unique_clicks", "UniqueClicks"),
    metric("unique_opens", "UniqueOpens"),
    metric("unsubscribe_drops", "UnsubscribeDrops"),
    metric("unsubscribes", "Unsubscribes"),
)


class SendgridStat(BaseModel):
    metrics: Dict[str, int] = Field(default_factory=dict)

    @field_validator("metrics", mode="before")
    @classmethod
    def _null_metrics(cls, v):
        if v is None:
            return {}
        if isinstance(v, dict):
            # a null counter reads as zero
            return {k: 0 if n is None else n for k, n in v.items()}
        return v


class SendgridStats(BaseModel):
    date: Optional[str] = None
    stats: List[Optional[SendgridStat]] = Field(default_factory=list)

    @field_validator("stats", mode="before")
    @classmethod
    def _null_stats(cls, v):
        return [] if v is None else v


_STATS_ADAPTER = TypeAdapter(Optional[List[Optional[SendgridStats]]])


def parse_stats(body: bytes | str) -> List[Optional[SendgridStats]]:
    """
    Decode a stats response body.

    JSON nulls are read as empty: a null body gives [], and null days,
    entries or counters stay None / 0 for the caller to skip.

    Raises SendgridDecodeError when the body is not JSON or not an array of
    daily stat objects.
    """
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    try:
        return _STATS_ADAPTER.validate_json(body) or []
    except ValidationError as e:
        log.error("sendgrid: failed to unmarshal response body: %s", text)
        raise SendgridDecodeError(f"failed to decode Sendgrid stats: {e}", text) from e


class SendgridPlugin:
    """
    Reports yesterday's global SendGrid stats.

    `transport` and `clock` exist for tests; production runs use httpx's
    default transport and the local wall clock.
    """

    def __init__(
        self,
        prefix: str = DEFAULT_METRIC_KEY_PREFIX,
        api_key: str = "",
        *,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.prefix = prefix
        self._api_key = api_key
        self._transport = transport
        self._clock = clock

    def metric_key_prefix(self) -> str:
        return self.prefix

    def _headers(self) -> Dict[str, str]:
        return {
            "user-agent": user_agent(),
            "authorization": f"Bearer {self._api_key}",
            "content-type": "application/json",
        }

    def _build_request(self, client: httpx.Client) -> httpx.Request:
        try:
            url = httpx.URL(ENDPOINT)
        except httpx.InvalidURL as e:
            log.error("sendgrid: failed to parse endpoint: %s", ENDPOINT)
            raise SendgridConfigError(f"invalid endpoint {ENDPOINT}: {e}") from e

        day = format_stats_date(stats_window_date(self._clock()))
        params = {"start_date": day, "end_date": day}
        try:
            return client.build_request("GET", url, params=params, headers=self._headers())
        except (ValueError, TypeError) as e:
            # e.g. an API key holding characters that cannot go in a header
            log.error("sendgrid: failed to build http request")
            raise SendgridConfigError(f"failed to build Sendgrid request: {e}") from e

    def fetch_metrics(self) -> Dict[str, float]:
        with httpx.Client(transport=self._transport) as client:
            request = self._build_request(client)
            try:
                resp = client.send(request)
            except httpx.RequestError as e:
                log.error("sendgrid: failed to request Sendgrid stats API %s: %s", request.url, e)
                raise SendgridTransportError(f"request to {request.url} failed: {e}") from e

        if resp.status_code != 200:
            log.warning("sendgrid: unexpected http status %d", resp.status_code)
            raise SendgridStatusError(resp.status_code, resp.text)

        stats = parse_stats(resp.content)
        day = stats[0] if stats else None
        if day is None or not day.stats:
            log.info("sendgrid: no stats found")
            return {}

        first = day.stats[0]
        metrics = {k: float(v) for k, v in first.metrics.items()} if first is not None else {}
        log.debug("sendgrid: fetched %d metrics for %s", len(metrics), day.date or "?")
        return metrics

    def graph_definition(self) -> Dict[str, Graph]:
        return {
            GRAPH_GLOBAL: {
                "label": title_case(self.metric_key_prefix()),
                "unit": UNIT_INTEGER,
                "metrics": [dict(m) for m in GLOBAL_METRICS],
            }
        }


__all__ = [
    "ENDPOINT",
    "GRAPH_GLOBAL",
    "GLOBAL_METRICS",
    "SendgridStat",
    "SendgridStats",
    "SendgridPlugin",
    "parse_stats",
]

"""
Command-line entry point for mackerel-plugin-sendgrid.

Usage (from mackerel-agent.conf):

    [plugin.metrics.sendgrid]
    command = ["mackerel-plugin-sendgrid", "-sendgrid-apikey", "SG.xxxx"]

Flags fall back to environment variables (METRIC_KEY_PREFIX,
SENDGRID_APIKEY) and then to a .env file.
"""
from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from mackerel_sendgrid import __version__
from mackerel_sendgrid.core.errors import SendgridError
from mackerel_sendgrid.core.settings import Settings, as_dict, load_settings
from mackerel_sendgrid.plugin import SendgridPlugin, run

log = logging.getLogger("mackerel_sendgrid")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    # stdout is reserved for mackerel-agent; logs go to stderr
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        stream=sys.stderr,
        format=LOG_FORMAT,
        force=True,
    )


def create_parser(settings: Settings) -> argparse.ArgumentParser:
    """Create the argument parser, with defaults taken from `settings`."""
    parser = argparse.ArgumentParser(
        prog="mackerel-plugin-sendgrid",
        description="Report yesterday's SendGrid stats to mackerel-agent",
        allow_abbrev=False,
    )
    parser.add_argument(
        "-metric-key-prefix", "--metric-key-prefix",
        dest="prefix",
        default=settings.METRIC_KEY_PREFIX,
        help="Metric key prefix (env METRIC_KEY_PREFIX, default: %(default)s)",
    )
    parser.add_argument(
        "-sendgrid-apikey", "--sendgrid-apikey",
        dest="api_key",
        default=settings.SENDGRID_APIKEY,
        help="API key of Sendgrid, needs access permission to get Stats (env SENDGRID_APIKEY)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    parser.add_argument(
        "-version", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    settings = load_settings()
    args = create_parser(settings).parse_args(argv)
    configure_logging(args.verbose)
    log.debug("settings: %s", as_dict(settings))

    if not args.api_key and not settings.meta_mode:
        log.warning("sendgrid api key is empty; the stats API will reject the request")

    plugin = SendgridPlugin(prefix=args.prefix, api_key=args.api_key)
    try:
        run(plugin, meta=settings.meta_mode)
    except SendgridError as e:
        log.error("fetch failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

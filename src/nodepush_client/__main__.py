"""Command line entry point for the nodepush client."""

from __future__ import annotations

import argparse
import sys
from typing import Dict, List, Optional

from .config import get_config_manager
from .core.app import NodePushApp


def _parse_headers(values: List[str]) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    for value in values:
        name, sep, header_value = value.partition("=")
        if not sep or not name.strip():
            raise argparse.ArgumentTypeError(f"Invalid header, expected NAME=VALUE: {value}")
        headers[name.strip()] = header_value.strip()
    return headers


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nodepush-client", description="Push buffered sensor readings to an HTTP ingest API")
    parser.add_argument("--server-url", help="Base URL of the ingest API")
    parser.add_argument("--mac", help="Hardware identifier reported for this gateway")
    parser.add_argument("--header", action="append", default=[], metavar="NAME=VALUE", help="Header sent with every request (repeatable)")
    parser.add_argument("--interval", type=float, help="Seconds between push cycles")
    parser.add_argument("--log-level", help="Log level, e.g. DEBUG or INFO")
    parser.add_argument("--no-gateway-stats", action="store_true", help="Do not sample gateway load and uptime")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        headers = _parse_headers(args.header)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    config = get_config_manager().load_config(
        server_url=args.server_url,
        mac=args.mac,
        headers=headers,
        poll_interval_seconds=args.interval,
    )

    if args.log_level:
        config.logging.level = args.log_level.upper()
    if args.no_gateway_stats:
        config.gateway_stats_enabled = False

    app = NodePushApp(config)
    return 0 if app.run() else 1


if __name__ == "__main__":
    sys.exit(main())

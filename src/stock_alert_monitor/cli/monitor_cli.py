"""CLI for the stock alert monitor API.

Usage:
  stock-alert-cli health
  stock-alert-cli run-cycle --secret "$CRON_SECRET"
  stock-alert-cli market-status --at 2024-01-09T15:00:00Z
"""
import argparse
import json
import os
import sys
from datetime import datetime, timezone

import httpx

from stock_alert_monitor.market_calendar import is_market_open, to_exchange_time


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def cmd_health(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/api/health")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_run_cycle(client: httpx.Client, args: argparse.Namespace) -> int:
    headers = {"Authorization": f"Bearer {args.secret}"} if args.secret else {}
    r = client.post("/api/cron", headers=headers)
    r.raise_for_status()
    data = r.json()
    print(data.get("message", ""))
    print_json(data.get("summary"))
    return 0 if data.get("success") else 1


def cmd_market_status(_: httpx.Client | None, args: argparse.Namespace) -> int:
    moment = datetime.fromisoformat(args.at) if args.at else datetime.now(timezone.utc)
    local = to_exchange_time(moment)
    state = "open" if is_market_open(moment) else "closed"
    print(f"Market is {state} ({local:%a %Y-%m-%d %H:%M} ET)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Query and drive a running stock alert monitor.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default="http://localhost:8001",
        help="API base URL (default: http://localhost:8001)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=120.0,
        help="Request timeout in seconds (default: 120; a cycle can take a while)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    subparsers.add_parser("health", help="GET /api/health")

    run_parser = subparsers.add_parser("run-cycle", help="Run one price-check cycle now")
    run_parser.add_argument(
        "--secret",
        default=os.getenv("CRON_SECRET"),
        help="Bearer secret for /api/cron (default: $CRON_SECRET)",
    )

    status_parser = subparsers.add_parser(
        "market-status", help="Evaluate market hours locally (no server needed)"
    )
    status_parser.add_argument(
        "--at",
        default=None,
        metavar="ISO8601",
        help="Instant to evaluate (naive values are UTC; default: now)",
    )
    return parser


def main(argv: list[str] | None = None, client: httpx.Client | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "market-status":
        return cmd_market_status(None, args)

    handlers = {
        "health": cmd_health,
        "run-cycle": cmd_run_cycle,
    }
    handler = handlers[args.command]
    try:
        if client is not None:
            return handler(client, args)
        with httpx.Client(base_url=args.base_url.rstrip("/"), timeout=args.timeout) as http:
            return handler(http, args)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code}", file=sys.stderr)
        if e.response.content:
            try:
                print(e.response.json(), file=sys.stderr)
            except ValueError:
                print(e.response.text, file=sys.stderr)
        return 1
    except httpx.RequestError as e:
        print(f"Request error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

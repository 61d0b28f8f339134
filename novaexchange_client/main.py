"""Command line entry point for calling a single NovaExchange endpoint."""

from __future__ import annotations

import argparse
import inspect
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, List, Optional, Sequence

import yaml

from .api_client import NovaExchangeAPI
from .config import load_config
from .errors import NovaExchangeError

ENDPOINTS = (
    "list_markets_summary",
    "get_market_summary",
    "get_market_order_history",
    "get_market_open_orders",
    "get_balances",
    "get_balance",
    "get_deposits",
    "get_withdrawals",
    "get_new_deposit_address",
    "get_deposit_address",
    "get_open_orders",
    "cancel_order",
    "execute_withdrawal",
    "execute_trade",
    "get_trade_history",
    "get_deposit_history",
    "get_withdrawal_history",
    "get_wallet_status",
)


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def call_endpoint(api: NovaExchangeAPI, endpoint: str, arguments: Sequence[str]) -> Any:
    if endpoint not in ENDPOINTS:
        raise ValueError(f"Unknown endpoint: {endpoint}")
    method = getattr(api, endpoint)
    try:
        inspect.signature(method).bind(*arguments)
    except TypeError as exc:
        raise ValueError(f"Bad arguments for {endpoint}: {exc}") from exc
    return method(*arguments).result()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Call a NovaExchange REST endpoint")
    parser.add_argument("config", type=Path, help="Path to client configuration file")
    parser.add_argument("endpoint", choices=ENDPOINTS, help="Client method to invoke")
    parser.add_argument("arguments", nargs="*", help="Positional arguments for the endpoint")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(args.verbose)
    try:
        config = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"error: could not load configuration: {exc}", file=sys.stderr)
        return 1
    if args.verbose:
        config = replace(config, verbose=True)
    with NovaExchangeAPI.from_config(config) as api:
        try:
            result = call_endpoint(api, args.endpoint, args.arguments)
        except ValueError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        except NovaExchangeError as exc:
            print(f"error ({exc.code}): {exc}", file=sys.stderr)
            return 1
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())

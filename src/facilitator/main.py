#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, cast

from dotenv import load_dotenv

from facilitator.adapters.sqlalchemy import shutdown, startup
from facilitator.app import persist_stake_requests
from facilitator.config import (
    ConfigurationError,
    HandlerConfig,
    configure_logging,
    get_handler_config,
    level_for_verbosity,
    parse_duplicate_key_policy,
)
from facilitator.domain.handlers import DuplicateKeyPolicy
from facilitator.domain.normalization import MalformedEventError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from facilitator.domain.model import StakeRequest

type RawTransaction = dict[str, object]


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Persist observed StakeRequested transactions"
    )
    parser.add_argument(
        "path",
        help="JSON array or JSON lines file of raw transactions ('-' reads stdin)",
    )
    parser.add_argument(
        "--duplicate-key-policy",
        choices=[policy.value for policy in DuplicateKeyPolicy],
        help="How transactions sharing a hash within the batch are resolved "
        "(default: FACILITATOR_DUPLICATE_KEY_POLICY or concurrent)",
    )
    parser.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy async database URI (overrides DATABASE_URI)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log output (-v for INFO, -vv for DEBUG)",
    )
    return parser.parse_args(list(argv))


def load_transactions(text: str) -> list[RawTransaction]:
    """Parse a JSON array or JSON lines document into raw transactions."""

    stripped = text.strip()
    if not stripped:
        return []
    if stripped.startswith("["):
        try:
            loaded = json.loads(stripped)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON document: {exc}") from exc
        items = cast(list[object], loaded) if isinstance(loaded, list) else [loaded]
    else:
        items = []
        for line_number, line in enumerate(stripped.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                items.append(json.loads(line))
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid JSON on line {line_number}: {exc}") from exc

    transactions: list[RawTransaction] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValueError(f"Transaction at index {index} is not a JSON object")
        transactions.append(cast(RawTransaction, item))
    return transactions


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _handler_config(args: argparse.Namespace) -> HandlerConfig:
    if args.duplicate_key_policy:
        return HandlerConfig(
            duplicate_key_policy=parse_duplicate_key_policy(args.duplicate_key_policy)
        )
    return get_handler_config()


async def _persist(
    transactions: list[RawTransaction],
    *,
    handler_config: HandlerConfig,
    database_uri: str | None,
) -> list[StakeRequest]:
    try:
        if database_uri:
            await startup(database_uri=database_uri, force=True)
        return await persist_stake_requests(transactions, handler_config=handler_config)
    finally:
        await shutdown()


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        parsed_args = _parse_args(sys.argv[1:] if argv is None else argv)
        configure_logging(level=level_for_verbosity(parsed_args.verbose), force=True)
        transactions = load_transactions(_read_source(parsed_args.path))
        handler_config = _handler_config(parsed_args)
    except (OSError, ValueError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        stake_requests = asyncio.run(
            _persist(
                transactions,
                handler_config=handler_config,
                database_uri=parsed_args.database_uri,
            )
        )
    except MalformedEventError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    except Exception as e:  # noqa: BLE001
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    awaiting = sum(1 for stake_request in stake_requests if stake_request.awaiting_message)
    print(f"Persisted {len(stake_requests)} stake requests ({awaiting} awaiting acceptance)")


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def cli() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    cli()

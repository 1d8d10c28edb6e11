#!/usr/bin/env python3
"""Operation tool — decode payloads, check and wait on transaction status.

A standalone CLI utility for the lifecycle engine:

    # Decode an unsigned payload
    python -m onchain_ops.tools.operation_tool decode <hex>

    # Resolve the lifecycle state of a broadcast transaction
    python -m onchain_ops.tools.operation_tool status <tx_hash>

    # Block until the transaction completes or fails
    python -m onchain_ops.tools.operation_tool wait <tx_hash> --timeout 30

    # Convert an atomic amount to display units
    python -m onchain_ops.tools.operation_tool amount 2500000000000000000 eth

The node URL and wait defaults come from ``ONCHAIN_OPS_*`` environment
variables or the YAML file named by ``--config``.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import TYPE_CHECKING

from onchain_ops.config.settings import AppConfig
from onchain_ops.errors.ops_errors import OpsError

if TYPE_CHECKING:
    from collections.abc import Sequence


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _cmd_decode(hex_payload: str) -> None:
    """Print the decoded fields of an unsigned payload."""
    from onchain_ops.codec.payload import decode_payload

    tx = decode_payload(hex_payload)
    for key, value in tx.to_dict().items():
        print(f"{key:<26} {value}")


def _cmd_amount(config: AppConfig, atomic: int, asset_id: str, network_id: str | None) -> None:
    """Print an atomic amount in display units."""
    from onchain_ops.amounts.normalizer import AmountNormalizer, format_amount

    normalizer = AmountNormalizer.from_networks(config.networks)
    print(format_amount(normalizer.to_display_units(atomic, asset_id, network_id)))


def _cmd_status(
    config: AppConfig,
    tx_hash: str,
    *,
    wait: bool,
    interval: float | None,
    timeout: float | None,
) -> None:
    """Resolve (or wait for) the lifecycle state of a transaction hash."""
    from onchain_ops.chain.node.service import NodeService
    from onchain_ops.lifecycle.status import StatusResolver
    from onchain_ops.lifecycle.wait import WaitCoordinator

    async def _run() -> None:
        node = NodeService(config.node)
        await node.connect()
        try:
            resolver = StatusResolver(node)
            if not wait:
                state = await resolver.resolve(tx_hash)
            else:
                waiter = WaitCoordinator(config.wait.interval_seconds, config.wait.timeout_seconds)
                state = await waiter.wait(
                    lambda: resolver.resolve(tx_hash),
                    operation_id=tx_hash,
                    interval_seconds=interval,
                    timeout_seconds=timeout,
                )
            print(f"{tx_hash}  {state}")
        finally:
            await node.close()

    asyncio.run(_run())


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="onchain-ops", description=__doc__.splitlines()[0])
    parser.add_argument("--config", default="", help="YAML config file")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    sub = parser.add_subparsers(dest="command", required=True)

    p_decode = sub.add_parser("decode", help="decode an unsigned payload")
    p_decode.add_argument("payload")

    p_status = sub.add_parser("status", help="resolve the status of a transaction hash")
    p_status.add_argument("tx_hash")

    p_wait = sub.add_parser("wait", help="wait until a transaction completes or fails")
    p_wait.add_argument("tx_hash")
    p_wait.add_argument("--interval", type=float, default=None)
    p_wait.add_argument("--timeout", type=float, default=None)

    p_amount = sub.add_parser("amount", help="convert an atomic amount to display units")
    p_amount.add_argument("atomic", type=int)
    p_amount.add_argument("asset_id")
    p_amount.add_argument("--network", default=None)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    config = AppConfig.from_yaml(args.config) if args.config else AppConfig()
    _setup_logging(args.log_level or ("DEBUG" if config.debug else config.log_level))

    try:
        if args.command == "decode":
            _cmd_decode(args.payload)
        elif args.command == "amount":
            _cmd_amount(config, args.atomic, args.asset_id, args.network)
        elif args.command == "status":
            _cmd_status(config, args.tx_hash, wait=False, interval=None, timeout=None)
        else:
            _cmd_status(
                config, args.tx_hash, wait=True, interval=args.interval, timeout=args.timeout
            )
    except OpsError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

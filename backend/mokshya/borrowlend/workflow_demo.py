#!/usr/bin/env python3
"""
Borrow/lend workflow demo script.

Runs the full scenario against an Aptos network using BorrowLendSDK:
- Create collection + token (borrower)
- Create and update the pool (module account)
- Lender offer, borrower select, borrower pay loan

Intended for:
- Manual verification of a freshly published borrowlend module
- Smoke testing the SDK against devnet

Usage:
    python -m mokshya.borrowlend.workflow_demo [--network devnet] [--owner-key 0x...]
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Dict, List, Optional

import requests
from aptos_sdk.account import Account
from aptos_sdk.async_client import FaucetClient
from dotenv import load_dotenv

from .client import BorrowLendSDK
from .config import APTOS_NETWORKS, BorrowLendSettings
from .workflow import DEFAULT_SETTLE_SECONDS, BorrowLendWorkflow, StepResult

# Load environment variables from backend/.env if present so the module
# owner key can be configured there as well as via the shell.
load_dotenv()

ENV_OWNER_KEY = "BORROWLEND_OWNER_PRIVATE_KEY"

# Test-only key of the devnet module account. Never use on mainnet.
DEVNET_OWNER_KEY = "0x1111111111111111111111111111111111111111111111111111111111111111"

HEALTH_CHECK_TIMEOUT = 5  # seconds


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the Mokshya borrow/lend workflow on Aptos.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--network",
        type=str,
        choices=sorted(APTOS_NETWORKS),
        default=None,
        help="Network preset (default: APTOS_NETWORK or devnet).",
    )
    parser.add_argument(
        "--node-url",
        type=str,
        default=None,
        help="Override the fullnode REST URL (or set APTOS_NODE_URL).",
    )
    parser.add_argument(
        "--faucet-url",
        type=str,
        default=None,
        help="Override the faucet URL (or set APTOS_FAUCET_URL).",
    )
    parser.add_argument(
        "--owner-key",
        dest="owner_key",
        type=str,
        default=None,
        help=f"Hex private key of the module account (or set {ENV_OWNER_KEY}).",
    )
    parser.add_argument(
        "--settle-seconds",
        type=float,
        default=DEFAULT_SETTLE_SECONDS,
        help=f"Pause between borrow select and repayment (default: {DEFAULT_SETTLE_SECONDS}).",
    )
    parser.add_argument(
        "--legacy-entry-points",
        action="store_true",
        help="Use the shared lender_offer/borrow_select entry points for cancel and claim.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO).",
    )
    return parser.parse_args(argv)


def _load_settings(args: argparse.Namespace) -> BorrowLendSettings:
    overrides: Dict[str, Any] = {}
    if args.network:
        overrides["aptos_network"] = args.network
    if args.node_url:
        overrides["aptos_node_url"] = args.node_url
    if args.faucet_url:
        overrides["aptos_faucet_url"] = args.faucet_url
    if args.legacy_entry_points:
        overrides["borrowlend_legacy_entry_points"] = True
    settings = BorrowLendSettings(**overrides)
    settings.validate_settings()
    return settings


def _get_owner_key(cli_key: Optional[str]) -> str:
    key = cli_key or os.getenv(ENV_OWNER_KEY) or DEVNET_OWNER_KEY
    if not key.startswith("0x"):
        key = "0x" + key
    return key


def check_node_health(node_url: str) -> Optional[int]:
    """
    Quick liveness check against the node's ledger info endpoint.

    Returns:
        The node's chain id, or None if the node did not answer sensibly
    """
    try:
        response = requests.get(node_url, timeout=HEALTH_CHECK_TIMEOUT)
    except requests.RequestException as e:
        print(f"Node health check failed for {node_url}: {e}")
        return None
    if response.status_code != 200:
        print(f"Node health check failed for {node_url}: HTTP {response.status_code}")
        return None
    try:
        return int(response.json()["chain_id"])
    except (ValueError, KeyError, TypeError) as e:
        print(f"Unexpected ledger info from {node_url}: {e}")
        return None


def _print_results(results: List[StepResult]) -> None:
    print("\n== Results ==")
    for result in results:
        status = "ok" if result.success else "FAILED"
        detail = result.tx_hash or result.error or "-"
        print(f"{result.name:<24} {status:<7} {detail}")


async def run(args: argparse.Namespace) -> List[StepResult]:
    settings = _load_settings(args)
    faucet_url = settings.resolved_faucet_url()

    owner = Account.load_key(_get_owner_key(args.owner_key))
    borrower = Account.generate()
    lender = Account.generate()
    print(f"Module account: {owner.address()}")
    print(f"Borrower:       {borrower.address()}")
    print(f"Lender:         {lender.address()}")

    async with BorrowLendSDK(settings=settings) as sdk:
        faucet = FaucetClient(faucet_url, sdk.client) if faucet_url else None
        workflow = BorrowLendWorkflow(
            sdk,
            owner=owner,
            borrower=borrower,
            lender=lender,
            faucet=faucet,
            settle_seconds=args.settle_seconds,
        )
        print(f"Collection:     {workflow.collection}\n")
        return await workflow.run()


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = _load_settings(args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        sys.exit(1)

    node_url = settings.resolved_node_url()
    chain_id = check_node_health(node_url)
    if chain_id is None:
        print("Provide a working node with --node-url or set APTOS_NODE_URL.")
        sys.exit(1)
    print(f"Connected to Aptos {settings.network().name} via {node_url} (chain id {chain_id})")

    results = asyncio.run(run(args))
    _print_results(results)

    if not results or not all(r.success for r in results):
        print("\n❌ Workflow failed.")
        sys.exit(1)
    print("\n✅ Workflow finished.")


if __name__ == "__main__":
    main()

"""
End-to-end borrow/lend scenario on a live Aptos network.

Flow:
- Fund the borrower, mint a collection + token
- Module account creates and updates a pool for the collection
- Fund the lender, lender places an offer
- Borrower selects the offer, waits for it to settle, then repays

Every step signs the RawTransaction built by BorrowLendSDK with the step's
account, submits it and waits for it to be committed. The run stops at the
first failing step.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional

from aptos_sdk.account import Account
from aptos_sdk.async_client import FaucetClient
from aptos_sdk.transactions import RawTransaction, SignedTransaction

from .client import BorrowLendSDK
from .tokens import TokenProperties, build_create_collection, build_create_token

logger = logging.getLogger(__name__)

DEFAULT_FUND_AMOUNT = 1_000_000_000  # octas
DEFAULT_SETTLE_SECONDS = 10


@dataclass
class ScenarioParams:
    """Terms used by the scenario run."""

    collection_prefix: str = "Mokshya Collection"
    token_name: str = "Mokshya Token #1"
    description: str = "Mokshya Token for test"
    uri: str = "https://github.com/mokshyaprotocol"
    collection_maximum: int = 100
    token_balance: int = 5
    token_maximum: int = 10
    token_property_version: int = 0
    dpr: int = 86400
    days: int = 1
    offer_per_nft: int = 100
    number_of_offers: int = 1
    properties: TokenProperties = field(
        default_factory=lambda: TokenProperties(
            keys=["attack", "num_of_use"],
            values=[bytes([1, 2]), bytes([1, 2])],
            types=["vector<u8>", "vector<u8>"],
        )
    )


@dataclass
class StepResult:
    """Outcome of one scenario step."""

    name: str
    success: bool
    tx_hash: Optional[str] = None
    error: Optional[str] = None


def sign_transaction(account: Account, raw_txn: RawTransaction) -> SignedTransaction:
    return SignedTransaction(raw_txn, account.sign_transaction(raw_txn))


class BorrowLendWorkflow:
    """Drives the full borrower/lender lifecycle against the borrowlend module."""

    def __init__(
        self,
        sdk: BorrowLendSDK,
        owner: Account,
        borrower: Account,
        lender: Account,
        faucet: Optional[FaucetClient] = None,
        params: Optional[ScenarioParams] = None,
        fund_amount: int = DEFAULT_FUND_AMOUNT,
        settle_seconds: float = DEFAULT_SETTLE_SECONDS,
    ) -> None:
        self.sdk = sdk
        self.owner = owner
        self.borrower = borrower
        self.lender = lender
        self.faucet = faucet
        self.params = params or ScenarioParams()
        self.fund_amount = fund_amount
        self.settle_seconds = settle_seconds

        # Collection names are unique per creator; suffix keeps reruns apart
        self.collection = f"{self.params.collection_prefix}{self.borrower.address()}"

    # --- Internal helpers --------------------------------------------------------

    async def _submit(self, account: Account, raw_txn: RawTransaction) -> str:
        signed = sign_transaction(account, raw_txn)
        tx_hash = await self.sdk.client.submit_bcs_transaction(signed)
        await self.sdk.client.wait_for_transaction(tx_hash)
        logger.info(f"Committed {tx_hash} from {account.address()}")
        return tx_hash

    async def _fund(self, account: Account) -> Optional[str]:
        if self.faucet is None:
            logger.info(f"No faucet configured; expecting {account.address()} to be funded")
            return None
        tx_hash = await self.faucet.fund_account(account.address(), self.fund_amount)
        return tx_hash if isinstance(tx_hash, str) else None

    # --- Steps -------------------------------------------------------------------

    async def fund_borrower(self) -> Optional[str]:
        return await self._fund(self.borrower)

    async def create_collection(self) -> str:
        call = build_create_collection(
            self.collection,
            self.params.description,
            self.params.uri,
            self.params.collection_maximum,
        )
        raw_txn = await self.sdk.generate_transaction(self.borrower.address(), call)
        return await self._submit(self.borrower, raw_txn)

    async def create_token(self) -> str:
        call = build_create_token(
            self.collection,
            self.params.token_name,
            self.params.description,
            self.params.token_balance,
            self.params.token_maximum,
            self.params.uri,
            self.borrower.address(),
            100,
            0,
            properties=self.params.properties,
        )
        raw_txn = await self.sdk.generate_transaction(self.borrower.address(), call)
        return await self._submit(self.borrower, raw_txn)

    async def create_pool(self) -> str:
        raw_txn = await self.sdk.create_pool(
            self.collection, self.borrower.address(), self.params.dpr, self.params.days
        )
        return await self._submit(self.owner, raw_txn)

    async def update_pool(self) -> str:
        raw_txn = await self.sdk.update_pool(self.collection, self.params.dpr, self.params.days, True)
        return await self._submit(self.owner, raw_txn)

    async def fund_lender(self) -> Optional[str]:
        return await self._fund(self.lender)

    async def lender_offer(self) -> str:
        raw_txn = await self.sdk.lender_offer(
            self.lender.address(),
            self.collection,
            self.params.offer_per_nft,
            self.params.number_of_offers,
        )
        return await self._submit(self.lender, raw_txn)

    async def borrower_select_offer(self) -> str:
        raw_txn = await self.sdk.borrower_select_offer(
            self.borrower.address(),
            self.collection,
            self.params.token_name,
            self.params.token_property_version,
            self.lender.address(),
        )
        tx_hash = await self._submit(self.borrower, raw_txn)
        # Loan must be on-chain for a moment before it can be repaid
        await asyncio.sleep(self.settle_seconds)
        return tx_hash

    async def borrower_pay_loan(self) -> str:
        raw_txn = await self.sdk.borrower_pay_loan(
            self.borrower.address(), self.collection, self.params.token_name
        )
        return await self._submit(self.borrower, raw_txn)

    def steps(self) -> List[tuple[str, Callable[[], Awaitable[Optional[str]]]]]:
        return [
            ("fund_borrower", self.fund_borrower),
            ("create_collection", self.create_collection),
            ("create_token", self.create_token),
            ("create_pool", self.create_pool),
            ("update_pool", self.update_pool),
            ("fund_lender", self.fund_lender),
            ("lender_offer", self.lender_offer),
            ("borrower_select_offer", self.borrower_select_offer),
            ("borrower_pay_loan", self.borrower_pay_loan),
        ]

    async def run(self) -> List[StepResult]:
        """Run every step in order, stopping at the first failure."""
        results: List[StepResult] = []
        for name, step in self.steps():
            logger.info(f"== {name} ==")
            try:
                tx_hash = await step()
            except Exception as exc:
                logger.error(f"Step {name} failed: {exc}")
                results.append(StepResult(name=name, success=False, error=str(exc)))
                break
            results.append(StepResult(name=name, success=True, tx_hash=tx_hash))
        return results

"""
BorrowLendSDK: thin aptos_sdk wrapper for the Mokshya borrowlend module.

One async method per contract entry point. Each method builds the
entry-function payload and hands it, together with the initiating account,
to `RestClient.create_bcs_transaction`, returning the unsigned
RawTransaction. Signing and submission stay with the caller.

This module does not validate inputs or translate errors; anything raised by
aptos_sdk (address parsing, BCS encoding, REST errors) reaches the caller as is.
"""

from __future__ import annotations

import logging
from typing import Optional

from aptos_sdk.account_address import AccountAddress
from aptos_sdk.async_client import RestClient
from aptos_sdk.transactions import RawTransaction

from . import payloads
from .config import BorrowLendSettings, EntryPoints
from .payloads import AddressLike, EntryFunctionCall, ensure_address

logger = logging.getLogger(__name__)


class BorrowLendSDK:
    """
    Payload builder for the borrowlend module.

    Pool administration (create/update) is sent from the module account;
    every other action is sent from the lender or borrower passed in.
    """

    def __init__(
        self,
        node_url: Optional[str] = None,
        module_address: Optional[AddressLike] = None,
        entry_points: Optional[EntryPoints] = None,
        rest_client: Optional[RestClient] = None,
        settings: Optional[BorrowLendSettings] = None,
    ) -> None:
        # Environment is read at construction; explicit arguments win
        settings = settings or BorrowLendSettings()
        self.node_url = node_url or settings.resolved_node_url()
        self.module_address: AccountAddress = ensure_address(
            module_address or settings.borrowlend_module_address
        )
        self.entry_points = entry_points or settings.entry_points()

        # Only close clients we created ourselves
        self._owns_client = rest_client is None
        self.client = rest_client or RestClient(self.node_url)

    async def __aenter__(self) -> "BorrowLendSDK":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self.client.close()

    async def generate_transaction(self, sender: AddressLike, call: EntryFunctionCall) -> RawTransaction:
        """Build an unsigned transaction for `call`, sent by `sender`."""
        sender_address = ensure_address(sender)
        logger.info(f"Generating {call.function_id} transaction for {sender_address}")
        return await self.client.create_bcs_transaction(sender_address, call.to_transaction_payload())

    # --- Pool administration -----------------------------------------------------

    async def create_pool(
        self,
        collection: str,
        creator_address: AddressLike,
        dpr: int,
        days: int,
    ) -> RawTransaction:
        """
        Create a pool for `collection` (module account only).

        Args:
            collection: Collection name
            creator_address: Collection creator address
            dpr: Daily interest rate
            days: Days before the loan expires
        """
        call = payloads.build_create_pool(
            self.module_address, collection, creator_address, dpr, days, self.entry_points
        )
        return await self.generate_transaction(self.module_address, call)

    async def update_pool(self, collection: str, dpr: int, days: int, state: bool) -> RawTransaction:
        """
        Update a pool's terms (module account only).

        Args:
            collection: Collection name
            dpr: Daily interest rate
            days: Days before the loan expires
            state: False switches the pool off
        """
        call = payloads.build_update_pool(self.module_address, collection, dpr, days, state, self.entry_points)
        return await self.generate_transaction(self.module_address, call)

    # --- Lender ------------------------------------------------------------------

    async def lender_offer(
        self,
        lender: AddressLike,
        collection: str,
        offer_per_nft: int,
        number_of_offers: int,
    ) -> RawTransaction:
        call = payloads.build_lender_offer(
            self.module_address, collection, offer_per_nft, number_of_offers, self.entry_points
        )
        return await self.generate_transaction(lender, call)

    async def lender_offer_cancel(self, lender: AddressLike, collection: str) -> RawTransaction:
        call = payloads.build_lender_offer_cancel(self.module_address, collection, self.entry_points)
        return await self.generate_transaction(lender, call)

    async def lender_claim_nft(self, lender: AddressLike, collection: str, token_name: str) -> RawTransaction:
        """Claim the pledged NFT after the borrower defaulted."""
        call = payloads.build_lender_claim_nft(self.module_address, collection, token_name, self.entry_points)
        return await self.generate_transaction(lender, call)

    # --- Borrower ----------------------------------------------------------------

    async def borrower_select_offer(
        self,
        borrower: AddressLike,
        collection: str,
        token_name: str,
        version: int,
        lender_address: AddressLike,
    ) -> RawTransaction:
        """
        Pledge a token and take the offer of `lender_address`.

        Args:
            borrower: Borrower account (token owner)
            collection: Collection name
            token_name: Token name
            version: Token property version
            lender_address: Lender whose offer is selected
        """
        call = payloads.build_borrower_select_offer(
            self.module_address, collection, token_name, version, lender_address, self.entry_points
        )
        return await self.generate_transaction(borrower, call)

    async def borrower_pay_loan(self, borrower: AddressLike, collection: str, token_name: str) -> RawTransaction:
        call = payloads.build_borrower_pay_loan(self.module_address, collection, token_name, self.entry_points)
        return await self.generate_transaction(borrower, call)

"""
Entry-function payload builders for the borrowlend module.

Every builder is a pure function: it picks the function identifier from the
entry-point table and lays the arguments out in the order the Move module
expects. Nothing here touches the network or validates values; address
parsing and BCS range errors surface from aptos_sdk unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Union

from aptos_sdk.account_address import AccountAddress
from aptos_sdk.bcs import Serializer
from aptos_sdk.transactions import EntryFunction, TransactionArgument, TransactionPayload
from aptos_sdk.type_tag import TypeTag

from .config import DEFAULT_ENTRY_POINTS, MODULE_NAME, EntryPoints

logger = logging.getLogger(__name__)

AddressLike = Union[str, AccountAddress]

ENTRY_FUNCTION_PAYLOAD = "entry_function_payload"


def ensure_address(address: AddressLike) -> AccountAddress:
    """Return `address` as an AccountAddress, parsing hex strings."""
    if isinstance(address, AccountAddress):
        return address
    return AccountAddress.from_str(address)


# --- Argument encoders ------------------------------------------------------------


def string_arg(value: str) -> TransactionArgument:
    return TransactionArgument(value, Serializer.str)


def u64_arg(value: int) -> TransactionArgument:
    return TransactionArgument(value, Serializer.u64)


def bool_arg(value: bool) -> TransactionArgument:
    return TransactionArgument(value, Serializer.bool)


def address_arg(value: AddressLike) -> TransactionArgument:
    return TransactionArgument(ensure_address(value), Serializer.struct)


# --- Descriptor -------------------------------------------------------------------


@dataclass(frozen=True)
class EntryFunctionCall:
    """
    A single contract call: `<address>::<module>::<function>` plus its
    type arguments and ordered value arguments.
    """

    module: str
    function: str
    arguments: Tuple[TransactionArgument, ...] = ()
    type_arguments: Tuple[TypeTag, ...] = field(default_factory=tuple)

    @property
    def function_id(self) -> str:
        return f"{self.module}::{self.function}"

    @property
    def values(self) -> List[Any]:
        return [arg.value for arg in self.arguments]

    def to_transaction_payload(self) -> TransactionPayload:
        entry_function = EntryFunction.natural(
            self.module,
            self.function,
            list(self.type_arguments),
            list(self.arguments),
        )
        return TransactionPayload(entry_function)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-style view of the call, in the REST API payload shape."""

        def _jsonable(value: Any) -> Any:
            if isinstance(value, AccountAddress):
                return str(value)
            if isinstance(value, bytes):
                return "0x" + value.hex()
            if isinstance(value, int) and not isinstance(value, bool):
                return str(value)
            if isinstance(value, (list, tuple)):
                return [_jsonable(v) for v in value]
            return value

        return {
            "type": ENTRY_FUNCTION_PAYLOAD,
            "function": self.function_id,
            "type_arguments": [str(tag) for tag in self.type_arguments],
            "arguments": [_jsonable(v) for v in self.values],
        }


def module_id(module_address: AddressLike) -> str:
    return f"{ensure_address(module_address)}::{MODULE_NAME}"


def _call(module_address: AddressLike, function: str, *arguments: TransactionArgument) -> EntryFunctionCall:
    call = EntryFunctionCall(module=module_id(module_address), function=function, arguments=tuple(arguments))
    logger.debug(f"Built {call.function_id} with {len(arguments)} argument(s)")
    return call


# --- Builders (one per contract action) ---------------------------------------------


def build_create_pool(
    module_address: AddressLike,
    collection: str,
    creator_address: AddressLike,
    dpr: int,
    days: int,
    entry_points: EntryPoints = DEFAULT_ENTRY_POINTS,
) -> EntryFunctionCall:
    """Pool creation: creator address, collection, daily rate, days."""
    return _call(
        module_address,
        entry_points.create_pool,
        address_arg(creator_address),
        string_arg(collection),
        u64_arg(dpr),
        u64_arg(days),
    )


def build_update_pool(
    module_address: AddressLike,
    collection: str,
    dpr: int,
    days: int,
    state: bool,
    entry_points: EntryPoints = DEFAULT_ENTRY_POINTS,
) -> EntryFunctionCall:
    """Pool update: collection, daily rate, days, active flag."""
    return _call(
        module_address,
        entry_points.update_pool,
        string_arg(collection),
        u64_arg(dpr),
        u64_arg(days),
        bool_arg(state),
    )


def build_lender_offer(
    module_address: AddressLike,
    collection: str,
    offer_per_nft: int,
    number_of_offers: int,
    entry_points: EntryPoints = DEFAULT_ENTRY_POINTS,
) -> EntryFunctionCall:
    return _call(
        module_address,
        entry_points.lender_offer,
        string_arg(collection),
        u64_arg(offer_per_nft),
        u64_arg(number_of_offers),
    )


def build_lender_offer_cancel(
    module_address: AddressLike,
    collection: str,
    entry_points: EntryPoints = DEFAULT_ENTRY_POINTS,
) -> EntryFunctionCall:
    return _call(module_address, entry_points.lender_offer_cancel, string_arg(collection))


def build_borrower_select_offer(
    module_address: AddressLike,
    collection: str,
    token_name: str,
    version: int,
    lender_address: AddressLike,
    entry_points: EntryPoints = DEFAULT_ENTRY_POINTS,
) -> EntryFunctionCall:
    """Borrower picks a lender's offer, pledging (collection, token_name, version)."""
    return _call(
        module_address,
        entry_points.borrower_select,
        string_arg(collection),
        string_arg(token_name),
        u64_arg(version),
        address_arg(lender_address),
    )


def build_borrower_pay_loan(
    module_address: AddressLike,
    collection: str,
    token_name: str,
    entry_points: EntryPoints = DEFAULT_ENTRY_POINTS,
) -> EntryFunctionCall:
    return _call(
        module_address,
        entry_points.borrower_pay_loan,
        string_arg(collection),
        string_arg(token_name),
    )


def build_lender_claim_nft(
    module_address: AddressLike,
    collection: str,
    token_name: str,
    entry_points: EntryPoints = DEFAULT_ENTRY_POINTS,
) -> EntryFunctionCall:
    return _call(
        module_address,
        entry_points.lender_claim_nft,
        string_arg(collection),
        string_arg(token_name),
    )

"""
Token v1 (0x3::token) payloads used to mint the NFTs that get pledged.

Only the two scripts needed to set up a borrow/lend scenario are covered:
collection creation and token creation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from aptos_sdk.bcs import Serializer
from aptos_sdk.transactions import TransactionArgument

from .payloads import AddressLike, EntryFunctionCall, address_arg, string_arg, u64_arg

TOKEN_MODULE = "0x3::token"

# description, uri, maximum
COLLECTION_MUTATE_SETTING = [False, False, False]
# maximum, uri, royalty, description, properties
TOKEN_MUTATE_SETTING = [False, False, False, False, False]


def bool_vector_arg(values: Sequence[bool]) -> TransactionArgument:
    return TransactionArgument(list(values), Serializer.sequence_serializer(Serializer.bool))


def string_vector_arg(values: Sequence[str]) -> TransactionArgument:
    return TransactionArgument(list(values), Serializer.sequence_serializer(Serializer.str))


def bytes_vector_arg(values: Sequence[bytes]) -> TransactionArgument:
    return TransactionArgument(list(values), Serializer.sequence_serializer(Serializer.to_bytes))


@dataclass
class TokenProperties:
    """Property map written into a token at creation (keys, BCS values, type names)."""

    keys: List[str] = field(default_factory=list)
    values: List[bytes] = field(default_factory=list)
    types: List[str] = field(default_factory=list)


def build_create_collection(
    name: str,
    description: str,
    uri: str,
    maximum: int,
    mutate_setting: Sequence[bool] = COLLECTION_MUTATE_SETTING,
) -> EntryFunctionCall:
    return EntryFunctionCall(
        module=TOKEN_MODULE,
        function="create_collection_script",
        arguments=(
            string_arg(name),
            string_arg(description),
            string_arg(uri),
            u64_arg(maximum),
            bool_vector_arg(mutate_setting),
        ),
    )


def build_create_token(
    collection: str,
    name: str,
    description: str,
    balance: int,
    maximum: int,
    uri: str,
    royalty_payee: AddressLike,
    royalty_points_denominator: int,
    royalty_points_numerator: int,
    properties: TokenProperties | None = None,
    mutate_setting: Sequence[bool] = TOKEN_MUTATE_SETTING,
) -> EntryFunctionCall:
    """
    Build `0x3::token::create_token_script`.

    `balance` tokens are minted to the sender; `maximum` caps the supply of
    this token id. Royalty is numerator / denominator of each sale.
    """
    properties = properties or TokenProperties()
    return EntryFunctionCall(
        module=TOKEN_MODULE,
        function="create_token_script",
        arguments=(
            string_arg(collection),
            string_arg(name),
            string_arg(description),
            u64_arg(balance),
            u64_arg(maximum),
            string_arg(uri),
            address_arg(royalty_payee),
            u64_arg(royalty_points_denominator),
            u64_arg(royalty_points_numerator),
            bool_vector_arg(mutate_setting),
            string_vector_arg(properties.keys),
            bytes_vector_arg(properties.values),
            string_vector_arg(properties.types),
        ),
    )

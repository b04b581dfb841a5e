import pytest
from aptos_sdk.account_address import AccountAddress
from aptos_sdk.transactions import TransactionPayload

from mokshya.borrowlend import payloads as p
from mokshya.borrowlend.config import DEFAULT_MODULE_ADDRESS, EntryPoints

MODULE = DEFAULT_MODULE_ADDRESS
PREFIX = f"{MODULE}::borrowlend"
CREATOR = "0x" + "ab" * 32
LENDER = "0x" + "cd" * 32
COLLECTION = "Mokshya Collection"
TOKEN = "Mokshya Token #1"


def test_create_pool_function_and_argument_order():
    call = p.build_create_pool(MODULE, COLLECTION, CREATOR, 86400, 1)
    assert call.function_id == f"{PREFIX}::initiate_create_pool"
    assert call.type_arguments == ()
    assert call.values == [AccountAddress.from_str(CREATOR), COLLECTION, 86400, 1]


def test_update_pool_function_and_argument_order():
    call = p.build_update_pool(MODULE, COLLECTION, 86400, 1, True)
    assert call.function_id == f"{PREFIX}::update_pool"
    assert call.values == [COLLECTION, 86400, 1, True]


def test_lender_offer_function_and_argument_order():
    call = p.build_lender_offer(MODULE, COLLECTION, 100, 1)
    assert call.function_id == f"{PREFIX}::lender_offer"
    assert call.values == [COLLECTION, 100, 1]


def test_lender_offer_cancel_uses_its_own_entry_point():
    call = p.build_lender_offer_cancel(MODULE, COLLECTION)
    assert call.function_id == f"{PREFIX}::lender_offer_cancel"
    assert call.values == [COLLECTION]


def test_borrower_select_function_and_argument_order():
    call = p.build_borrower_select_offer(MODULE, COLLECTION, TOKEN, 0, LENDER)
    assert call.function_id == f"{PREFIX}::borrow_select"
    assert call.values == [COLLECTION, TOKEN, 0, AccountAddress.from_str(LENDER)]


def test_borrower_pay_loan_is_fully_qualified():
    # The module address prefix must never be dropped
    call = p.build_borrower_pay_loan(MODULE, COLLECTION, TOKEN)
    assert call.function_id == f"{PREFIX}::borrower_pay_loan"
    assert call.values == [COLLECTION, TOKEN]


def test_lender_claim_nft_uses_its_own_entry_point():
    call = p.build_lender_claim_nft(MODULE, COLLECTION, TOKEN)
    assert call.function_id == f"{PREFIX}::lender_claim_nft"
    assert call.values == [COLLECTION, TOKEN]


def test_legacy_table_reuses_shared_entry_points():
    legacy = EntryPoints.legacy()
    cancel = p.build_lender_offer_cancel(MODULE, COLLECTION, entry_points=legacy)
    claim = p.build_lender_claim_nft(MODULE, COLLECTION, TOKEN, entry_points=legacy)
    assert cancel.function_id == f"{PREFIX}::lender_offer"
    assert claim.function_id == f"{PREFIX}::borrow_select"
    # Argument lists are unchanged by the legacy table
    assert cancel.values == [COLLECTION]
    assert claim.values == [COLLECTION, TOKEN]


def test_descriptor_converts_to_entry_function_payload():
    call = p.build_borrower_select_offer(MODULE, COLLECTION, TOKEN, 0, LENDER)
    payload = call.to_transaction_payload()
    assert isinstance(payload, TransactionPayload)
    entry_function = payload.value
    assert entry_function.function == "borrow_select"
    assert entry_function.module.name == "borrowlend"
    assert entry_function.module.address == AccountAddress.from_str(MODULE)
    assert len(entry_function.args) == 4


def test_descriptor_dict_matches_rest_payload_shape():
    call = p.build_create_pool(MODULE, COLLECTION, CREATOR, 86400, 1)
    assert call.to_dict() == {
        "type": "entry_function_payload",
        "function": f"{PREFIX}::initiate_create_pool",
        "type_arguments": [],
        "arguments": [CREATOR, COLLECTION, "86400", "1"],
    }


def test_descriptor_is_immutable():
    call = p.build_lender_offer(MODULE, COLLECTION, 100, 1)
    with pytest.raises(AttributeError):
        call.function = "lender_offer_cancel"


def test_malformed_address_error_is_not_translated():
    with pytest.raises((RuntimeError, ValueError)):
        p.build_borrower_select_offer(MODULE, COLLECTION, TOKEN, 0, "not-an-address")


def test_ensure_address_passes_through_account_address():
    address = AccountAddress.from_str(LENDER)
    assert p.ensure_address(address) is address

"""
Static configuration for the Mokshya borrow/lend module on Aptos.

Provides:
- The deployed module address and name
- Network presets (node + faucet URLs)
- The entry-point table used to build payloads
- Environment-driven settings (.env supported)
"""

from dataclasses import dataclass, replace
from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


# Account that published the borrowlend module
DEFAULT_MODULE_ADDRESS = "0x147e4d3a5b10eaed2a93536e284c23096dfcea9ac61f0a8420e5d01fbd8f0ea8"

MODULE_NAME = "borrowlend"

DEFAULT_NETWORK = "devnet"


@dataclass(frozen=True)
class NetworkConfig:
    name: str
    node_url: str
    faucet_url: Optional[str] = None


APTOS_NETWORKS: Dict[str, NetworkConfig] = {
    "devnet": NetworkConfig(
        name="devnet",
        node_url="https://fullnode.devnet.aptoslabs.com/v1",
        faucet_url="https://faucet.devnet.aptoslabs.com",
    ),
    "testnet": NetworkConfig(
        name="testnet",
        node_url="https://fullnode.testnet.aptoslabs.com/v1",
        faucet_url="https://faucet.testnet.aptoslabs.com",
    ),
    "mainnet": NetworkConfig(
        name="mainnet",
        node_url="https://fullnode.mainnet.aptoslabs.com/v1",
    ),
}


@dataclass(frozen=True)
class EntryPoints:
    """Function names of the borrowlend module, one per supported action."""

    create_pool: str = "initiate_create_pool"
    update_pool: str = "update_pool"
    lender_offer: str = "lender_offer"
    lender_offer_cancel: str = "lender_offer_cancel"
    borrower_select: str = "borrow_select"
    borrower_pay_loan: str = "borrower_pay_loan"
    lender_claim_nft: str = "lender_claim_nft"

    @classmethod
    def legacy(cls) -> "EntryPoints":
        """
        Table shipped by the first SDK release, where cancel and claim
        reuse the lender_offer and borrow_select entry points. The pay-loan
        identifier stays fully qualified with the module address.
        """
        return cls(lender_offer_cancel="lender_offer", lender_claim_nft="borrow_select")


DEFAULT_ENTRY_POINTS = EntryPoints()


class BorrowLendSettings(BaseSettings):
    """Aptos network + borrowlend module configuration."""

    # Network preset; explicit URLs below take precedence
    aptos_network: str = Field(DEFAULT_NETWORK, description="One of APTOS_NETWORKS")
    aptos_node_url: Optional[str] = Field(None, description="Fullnode REST URL, including /v1")
    aptos_faucet_url: Optional[str] = None

    # Module configuration
    borrowlend_module_address: str = DEFAULT_MODULE_ADDRESS
    borrowlend_legacy_entry_points: bool = Field(
        False, description="Route cancel and claim through the shared lender_offer/borrow_select entry points"
    )
    borrowlend_cancel_function: Optional[str] = Field(None, description="Bare function name for lender offer cancel")
    borrowlend_claim_function: Optional[str] = Field(None, description="Bare function name for lender claim")

    class Config:
        """Pydantic config."""
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    def network(self) -> NetworkConfig:
        try:
            return APTOS_NETWORKS[self.aptos_network.lower()]
        except KeyError:
            raise ValueError(
                f"APTOS_NETWORK must be one of {sorted(APTOS_NETWORKS)}, got {self.aptos_network}"
            ) from None

    def resolved_node_url(self) -> str:
        return self.aptos_node_url or self.network().node_url

    def resolved_faucet_url(self) -> Optional[str]:
        return self.aptos_faucet_url or self.network().faucet_url

    def entry_points(self) -> EntryPoints:
        """Resolve the entry-point table, applying per-action overrides."""
        base = EntryPoints.legacy() if self.borrowlend_legacy_entry_points else EntryPoints()
        overrides = {}
        if self.borrowlend_cancel_function:
            overrides["lender_offer_cancel"] = self.borrowlend_cancel_function
        if self.borrowlend_claim_function:
            overrides["lender_claim_nft"] = self.borrowlend_claim_function
        return replace(base, **overrides)

    def validate_settings(self) -> None:
        """Validate required configuration.

        Raises:
            ValueError: If configuration is missing or invalid
        """
        self.network()

        address = self.borrowlend_module_address
        if not address.startswith("0x") or len(address) != 66:
            raise ValueError(
                f"BORROWLEND_MODULE_ADDRESS must be a 32-byte hex address: {address}"
            )
        try:
            int(address[2:], 16)
        except ValueError:
            raise ValueError(
                f"BORROWLEND_MODULE_ADDRESS must be a 32-byte hex address: {address}"
            ) from None

        for field in ("borrowlend_cancel_function", "borrowlend_claim_function"):
            name = getattr(self, field)
            if name is not None and (not name or "::" in name):
                raise ValueError(f"{field.upper()} must be a bare function name, got {name!r}")


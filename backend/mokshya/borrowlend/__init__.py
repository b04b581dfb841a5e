"""
Mokshya borrow/lend SDK for Aptos.

This package provides:
- Static config (module address, network presets, entry-point table)
- Pure payload builders for every borrowlend entry point
- BorrowLendSDK for turning those payloads into unsigned transactions
- Token v1 helpers and an end-to-end workflow for live networks
"""

from .client import BorrowLendSDK
from .config import (
    APTOS_NETWORKS,
    DEFAULT_MODULE_ADDRESS,
    MODULE_NAME,
    BorrowLendSettings,
    EntryPoints,
    NetworkConfig,
)
from .payloads import EntryFunctionCall
from .workflow import BorrowLendWorkflow, ScenarioParams, StepResult

__all__ = [
    "BorrowLendSDK",
    "APTOS_NETWORKS",
    "DEFAULT_MODULE_ADDRESS",
    "MODULE_NAME",
    "BorrowLendSettings",
    "EntryPoints",
    "NetworkConfig",
    "EntryFunctionCall",
    "BorrowLendWorkflow",
    "ScenarioParams",
    "StepResult",
]

"""Domain package for ledger models and cost-basis rules."""

from .constants import (
    BASE_ASSET,
    BTC,
    COLD_STORAGE_WALLET,
    DEFAULT_UNRATED_BUDGET,
)
from .models import (
    Asset,
    AssetClass,
    GroupedLedger,
    LedgerEntry,
    LedgerEntryType,
    Portfolio,
    PortfolioHistoryItem,
    Ref,
    Single,
    Trade,
    Transfer,
)
from .services import (
    build_balances,
    build_history,
    classify_transaction,
    group_ledger_entries,
    index_entries,
    subtract,
    verify_balances,
)

__all__ = [
    "BASE_ASSET",
    "BTC",
    "COLD_STORAGE_WALLET",
    "DEFAULT_UNRATED_BUDGET",
    "Asset",
    "AssetClass",
    "GroupedLedger",
    "LedgerEntry",
    "LedgerEntryType",
    "Portfolio",
    "PortfolioHistoryItem",
    "Ref",
    "Single",
    "Trade",
    "Transfer",
    "build_balances",
    "build_history",
    "classify_transaction",
    "group_ledger_entries",
    "index_entries",
    "subtract",
    "verify_balances",
]

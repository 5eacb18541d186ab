"""Domain models package."""

from .grouping import GroupedLedger, Single, Trade, Transfer, flatten_grouped
from .history import PortfolioHistoryItem
from .ledger import Asset, AssetClass, LedgerEntry, LedgerEntryType
from .lots import Balance, Portfolio, Ref, RefQueue
from .onchain import (
    OnchainClassification,
    RawTransaction,
    ResolvedInput,
    SkipCounts,
    TransactionKind,
    TxInput,
    TxOutput,
)

__all__ = [
    "Asset",
    "AssetClass",
    "LedgerEntry",
    "LedgerEntryType",
    "GroupedLedger",
    "Single",
    "Trade",
    "Transfer",
    "flatten_grouped",
    "Ref",
    "RefQueue",
    "Balance",
    "Portfolio",
    "PortfolioHistoryItem",
    "TxInput",
    "TxOutput",
    "RawTransaction",
    "ResolvedInput",
    "TransactionKind",
    "OnchainClassification",
    "SkipCounts",
]

"""Application use cases package."""

from .build_portfolio import BuildPortfolioUseCase, PortfolioReport
from .collect_ledger import CollectLedgerUseCase, CollectedLedger
from .import_onchain import (
    ImportOnchainTransactionsUseCase,
    OnchainClassifier,
    OnchainImportResult,
)
from .sync_ledger import SyncLedgerResult, SyncLedgerUseCase

__all__ = [
    "BuildPortfolioUseCase",
    "PortfolioReport",
    "CollectLedgerUseCase",
    "CollectedLedger",
    "ImportOnchainTransactionsUseCase",
    "OnchainClassifier",
    "OnchainImportResult",
    "SyncLedgerUseCase",
    "SyncLedgerResult",
]

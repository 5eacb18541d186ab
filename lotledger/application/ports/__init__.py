"""Application ports package."""

from .database import DatabaseEnginePort
from .ledger_repository import LedgerRepositoryPort
from .ledger_source import LedgerSourcePort
from .transactions import TransactionResolverPort

__all__ = [
    "DatabaseEnginePort",
    "LedgerRepositoryPort",
    "LedgerSourcePort",
    "TransactionResolverPort",
]

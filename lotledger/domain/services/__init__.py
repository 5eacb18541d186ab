"""Domain services package."""

from .balances import (
    BalanceBuildResult,
    build_balances,
    iter_refs,
    total_amount,
    total_spent,
)
from .fifo import queue_total, subtract
from .grouping import group_ledger_entries
from .history import build_history
from .onchain import classify_transaction
from .validation import BalanceVerification, index_entries, verify_balances

__all__ = [
    "BalanceBuildResult",
    "BalanceVerification",
    "build_balances",
    "build_history",
    "classify_transaction",
    "group_ledger_entries",
    "index_entries",
    "iter_refs",
    "queue_total",
    "subtract",
    "total_amount",
    "total_spent",
    "verify_balances",
]

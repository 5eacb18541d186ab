"""Exceptions raised by the ledger engine."""

from dataclasses import dataclass
from decimal import Decimal


class LedgerError(Exception):
    """Base exception for ledger related errors."""


class InvariantViolation(LedgerError):
    """Raised when the ledger or a lot queue is in an impossible state."""


class DuplicateEntryError(InvariantViolation):
    """Raised when two entries share the same global id."""

    def __init__(self, global_id: str):
        super().__init__(f"Duplicated global id: {global_id}")
        self.global_id = global_id


class InsufficientBalanceError(InvariantViolation):
    """Raised when more is subtracted from a lot queue than it holds."""

    def __init__(self, requested: Decimal, available: Decimal):
        super().__init__(
            f"Cannot subtract {requested} from a balance of {available}"
        )
        self.requested = requested
        self.available = available


class ConservationError(InvariantViolation):
    """Raised when a subtraction does not preserve the queue total."""

    def __init__(self, expected: Decimal, actual: Decimal):
        super().__init__(
            f"Balance subtract error, should be {expected}, it's {actual}"
        )
        self.expected = expected
        self.actual = actual


class ClassificationError(LedgerError):
    """Raised when entries cannot be turned into economic events."""


class GroupingError(ClassificationError):
    """Raised when a group of entries has an unexpected shape."""

    def __init__(self, message: str, entries: list | None = None):
        super().__init__(message)
        self.entries = list(entries or [])


class AmbiguousTradeError(GroupingError):
    """Raised when the spend side of a trade cannot be identified."""

    def __init__(self, entries: list):
        super().__init__(
            "Trade legs do not have opposite signs: "
            + ", ".join(f"{entry.global_id}={entry.amount}" for entry in entries),
            entries,
        )


class UnsupportedTransferError(LedgerError, NotImplementedError):
    """Raised for transfers between different wallets.

    Moving lots across wallets needs a product decision that has not been
    taken yet, so the builder refuses to guess.
    """

    def __init__(self, transfer):
        super().__init__(
            "Transfers between wallets are not supported: "
            f"{transfer.source.wallet} -> {transfer.destination.wallet} "
            f"{transfer.destination.amount} {transfer.destination.asset.name}"
        )
        self.transfer = transfer


@dataclass(frozen=True)
class SourceFailure:
    """Failure reported by a ledger source."""

    source: str
    error: str


class IncompleteLedgerError(LedgerError):
    """Raised when some ledger sources failed and partial data is refused."""

    def __init__(self, failures: list[SourceFailure]):
        names = ", ".join(failure.source for failure in failures)
        super().__init__(f"Ledger sources failed: {names}")
        self.failures = list(failures)


__all__ = [
    "LedgerError",
    "InvariantViolation",
    "DuplicateEntryError",
    "InsufficientBalanceError",
    "ConservationError",
    "ClassificationError",
    "GroupingError",
    "AmbiguousTradeError",
    "UnsupportedTransferError",
    "SourceFailure",
    "IncompleteLedgerError",
]

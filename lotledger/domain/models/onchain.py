"""Domain models for raw and classified on-chain transactions."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from .ledger import LedgerEntry


@dataclass(frozen=True)
class TxInput:
    """Reference to a previous output spent by a transaction."""

    txid: str | None
    vout: int | None


@dataclass(frozen=True)
class TxOutput:
    """Output created by a transaction."""

    n: int
    value: Decimal
    address: str | None


@dataclass(frozen=True)
class RawTransaction:
    """Transaction as returned by a blockchain indexer."""

    txid: str
    time: int | None
    vin: list[TxInput] = field(default_factory=list)
    vout: list[TxOutput] = field(default_factory=list)


@dataclass(frozen=True)
class ResolvedInput:
    """Transaction input resolved to the output it spends."""

    txid: str
    vout: int
    value: Decimal
    address: str


class TransactionKind(str, Enum):
    """Direction of an on-chain transaction relative to known addresses."""

    INTERNAL = "internal"
    WITHDRAWAL = "withdrawal"
    DEPOSIT = "deposit"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class OnchainClassification:
    """Outcome of classifying a single on-chain transaction.

    Attributes:
        txid: Classified transaction id.
        kind: Direction inferred from known addresses.
        entries: Ledger entries emitted for the transaction.
        fee: Resolved inputs minus addressable outputs.
        skipped_inputs: Inputs that could not be resolved to an address.
        skipped_outputs: Outputs without an address.
    """

    txid: str
    kind: TransactionKind
    entries: list[LedgerEntry]
    fee: Decimal
    skipped_inputs: int = 0
    skipped_outputs: int = 0

    @property
    def needs_review(self) -> bool:
        return self.kind is TransactionKind.AMBIGUOUS


@dataclass(frozen=True)
class SkipCounts:
    """Inputs and outputs left out of the classification of a batch."""

    inputs: int = 0
    outputs: int = 0

    def __add__(self, other: "SkipCounts") -> "SkipCounts":
        return SkipCounts(
            inputs=self.inputs + other.inputs,
            outputs=self.outputs + other.outputs,
        )

    @property
    def total(self) -> int:
        return self.inputs + self.outputs


__all__ = [
    "TxInput",
    "TxOutput",
    "RawTransaction",
    "ResolvedInput",
    "TransactionKind",
    "OnchainClassification",
    "SkipCounts",
]

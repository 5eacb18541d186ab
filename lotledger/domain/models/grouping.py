"""Grouped ledger events produced by the entry grouper."""

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from .ledger import LedgerEntry


@dataclass(frozen=True)
class Single:
    """Entry that does not belong to any trade or transfer."""

    entry: LedgerEntry

    @property
    def date(self) -> datetime:
        return self.entry.date


@dataclass(frozen=True)
class Trade:
    """Exchange between two assets within a single wallet."""

    spend: LedgerEntry
    receive: LedgerEntry

    @property
    def date(self) -> datetime:
        return min(self.spend.date, self.receive.date)


@dataclass(frozen=True)
class Transfer:
    """Withdrawal from one wallet matched with a deposit in another."""

    source: LedgerEntry
    destination: LedgerEntry

    @property
    def date(self) -> datetime:
        return min(self.source.date, self.destination.date)


GroupedLedger = Union[Single, Trade, Transfer]


def flatten_grouped(grouped: list[GroupedLedger]) -> list[LedgerEntry]:
    """Return the entries of grouped events in processing order."""
    entries: list[LedgerEntry] = []
    for event in grouped:
        if isinstance(event, Single):
            entries.append(event.entry)
        elif isinstance(event, Trade):
            entries.extend((event.spend, event.receive))
        elif isinstance(event, Transfer):
            entries.extend((event.source, event.destination))
        else:
            raise TypeError(f"Unsupported grouped ledger event: {event!r}")
    return entries


__all__ = ["Single", "Trade", "Transfer", "GroupedLedger", "flatten_grouped"]

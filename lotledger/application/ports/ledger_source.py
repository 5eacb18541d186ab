"""Port for reading ledger entries from an external export."""

from typing import Protocol

from lotledger.domain.models import LedgerEntry, SkipCounts


class LedgerSourcePort(Protocol):
    """Port exposing read access to the entries of one wallet export.

    Implementations usually parse an exchange CSV export or a cached
    on-chain history. They are read concurrently, one task per source.

    Attributes:
        name: Source name used in diagnostics.
        skip_counts: Items the last read left out, zero for sources that
            never skip anything.
    """

    name: str
    skip_counts: SkipCounts

    def read_entries(self) -> list[LedgerEntry]:
        """Return the normalized entries of the source."""


__all__ = ["LedgerSourcePort"]

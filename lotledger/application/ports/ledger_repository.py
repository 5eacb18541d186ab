"""Port for persisting normalized ledger entries."""

from typing import Protocol

from lotledger.domain.models import LedgerEntry


class LedgerRepositoryPort(Protocol):
    """Port exposing read and write access to stored ledger entries."""

    def prepare_storage(self) -> None:
        """Ensure the storage is ready to receive entries."""

    def upsert_entries(self, entries: list[LedgerEntry]) -> int:
        """Insert or replace entries keyed by global id.

        Returns:
            int: Number of entries written.
        """

    def fetch_entries(self) -> list[LedgerEntry]:
        """Return every stored entry, oldest first."""


__all__ = ["LedgerRepositoryPort"]

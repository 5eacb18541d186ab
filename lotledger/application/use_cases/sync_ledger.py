"""Use case persisting ledger entries into the ledger database."""

from dataclasses import dataclass

from lotledger.application.ports.ledger_repository import LedgerRepositoryPort
from lotledger.domain.models import LedgerEntry
from lotledger.domain.services.validation import index_entries
from lotledger.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class SyncLedgerResult:
    """Result of a sync_ledger run.

    Attributes:
        source_count: Number of entries received.
        upserted_count: Number of entries written to the repository.
    """

    source_count: int
    upserted_count: int


class SyncLedgerUseCase:
    """Store entries in the repository, replacing those with the same id.

    Running the sync twice with the same entries leaves the storage
    unchanged.
    """

    def __init__(self, repository: LedgerRepositoryPort, logger=None) -> None:
        """Initialize the use case.

        Args:
            repository: Port providing write access to stored entries.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._repository = repository
        self._logger = logger or get_app_logger()

    def run(self, entries: list[LedgerEntry]) -> SyncLedgerResult:
        """Execute the synchronization job.

        Args:
            entries: Entries to store.

        Returns:
            SyncLedgerResult: Summary of how many entries were processed.

        Raises:
            DuplicateEntryError: If the batch holds the same global id twice.
        """
        index_entries(entries)
        self._repository.prepare_storage()
        upserted = self._repository.upsert_entries(list(entries))
        self._logger.info(f"Upserted {upserted} ledger entries")
        return SyncLedgerResult(
            source_count=len(entries),
            upserted_count=upserted,
        )


__all__ = ["SyncLedgerUseCase", "SyncLedgerResult"]

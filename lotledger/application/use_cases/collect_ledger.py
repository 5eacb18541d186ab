"""Use case collecting ledger entries from every configured source.

Sources are read concurrently, one task per source, on a bounded thread
pool. A failing source never hides the others: failures are collected and
the caller decides whether partial data is acceptable.

Results are merged in the configured source order. An entry whose global
id was already read from an earlier source replaces it, so a source
re-reading stored data upserts rather than duplicates it.
"""

from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

from lotledger.application.ports.ledger_source import LedgerSourcePort
from lotledger.domain.exceptions import IncompleteLedgerError, SourceFailure
from lotledger.domain.models import LedgerEntry, SkipCounts
from lotledger.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class CollectedLedger:
    """Entries gathered from all sources.

    Attributes:
        entries: Entries sorted by date, ignored ids removed.
        failures: Sources that could not be read.
        ignored_count: Number of entries dropped by the ignore list.
        missing_ignored_ids: Ignored ids that matched no entry.
        replaced_count: Entries superseded by a later source.
        skip_counts: Items the sources left out while reading.
    """

    entries: list[LedgerEntry]
    failures: list[SourceFailure] = field(default_factory=list)
    ignored_count: int = 0
    missing_ignored_ids: list[str] = field(default_factory=list)
    replaced_count: int = 0
    skip_counts: SkipCounts = field(default_factory=SkipCounts)

    @property
    def is_complete(self) -> bool:
        return not self.failures


class CollectLedgerUseCase:
    """Read every ledger source and merge the entries."""

    def __init__(
        self,
        sources: list[LedgerSourcePort],
        max_workers: int = 4,
        ignored_ids: Iterable[str] = (),
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            sources: Ledger sources to read, later sources win on conflicts.
            max_workers: Upper bound on concurrently read sources.
            ignored_ids: Global ids of entries to drop.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._sources = list(sources)
        self._max_workers = max_workers
        self._ignored_ids = frozenset(ignored_ids)
        self._logger = logger or get_app_logger()

    def execute(self, allow_partial: bool = False) -> CollectedLedger:
        """Read the sources and merge their entries.

        Args:
            allow_partial: Return the entries of the healthy sources when
                some sources failed instead of raising.

        Returns:
            CollectedLedger: Merged entries and collection diagnostics.

        Raises:
            IncompleteLedgerError: If a source failed and partial data is
                not allowed.
        """
        read: dict[int, list[LedgerEntry]] = {}
        failures: list[SourceFailure] = []
        skip_counts = SkipCounts()

        if self._sources:
            workers = min(self._max_workers, len(self._sources))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                future_to_position = {
                    executor.submit(source.read_entries): position
                    for position, source in enumerate(self._sources)
                }
                for future in as_completed(future_to_position):
                    position = future_to_position[future]
                    source = self._sources[position]
                    try:
                        source_entries = future.result()
                    except Exception as exc:
                        self._logger.error(
                            f"Error reading ledger source {source.name}: {exc}"
                        )
                        failures.append(
                            SourceFailure(source=source.name, error=str(exc))
                        )
                        continue
                    self._logger.info(
                        f"Read {len(source_entries)} entries from {source.name}"
                    )
                    read[position] = source_entries
                    skip_counts = skip_counts + source.skip_counts

        failures.sort(key=lambda failure: failure.source)
        if failures and not allow_partial:
            raise IncompleteLedgerError(failures)

        entries, replaced_count = self._merge(read)
        kept, ignored_count, missing = self._filter_ignored(entries)
        # Sources finish in any order, sort on every key for a stable merge
        kept.sort(key=lambda entry: (entry.date, entry.wallet, entry.id))
        return CollectedLedger(
            entries=kept,
            failures=failures,
            ignored_count=ignored_count,
            missing_ignored_ids=missing,
            replaced_count=replaced_count,
            skip_counts=skip_counts,
        )

    def _merge(
        self,
        read: dict[int, list[LedgerEntry]],
    ) -> tuple[list[LedgerEntry], int]:
        """Upsert the entries of each source by global id, in source order.

        Duplicates inside a single source are kept so that the ledger
        validation still rejects them.

        Args:
            read: Entries by position of their source.

        Returns:
            tuple: Merged entries and the number of replaced entries.
        """
        merged: dict[str, list[LedgerEntry]] = {}
        replaced = 0
        for position in sorted(read):
            by_id: dict[str, list[LedgerEntry]] = {}
            for entry in read[position]:
                by_id.setdefault(entry.global_id, []).append(entry)
            for global_id, group in by_id.items():
                replaced += len(merged.get(global_id, []))
                merged[global_id] = group
        if replaced:
            self._logger.info(f"{replaced} entries replaced by a later source")
        return [entry for group in merged.values() for entry in group], replaced

    def _filter_ignored(
        self,
        entries: list[LedgerEntry],
    ) -> tuple[list[LedgerEntry], int, list[str]]:
        """Drop entries whose global id is on the ignore list.

        Args:
            entries: Entries read from the sources.

        Returns:
            tuple: Kept entries, dropped count and ignored ids not found.
        """
        if not self._ignored_ids:
            return list(entries), 0, []
        kept = [
            entry for entry in entries if entry.global_id not in self._ignored_ids
        ]
        found = {
            entry.global_id
            for entry in entries
            if entry.global_id in self._ignored_ids
        }
        missing = sorted(self._ignored_ids - found)
        if missing:
            self._logger.warning(
                f"Ignored entries not found: {', '.join(missing)}"
            )
        return kept, len(entries) - len(kept), missing


__all__ = ["CollectLedgerUseCase", "CollectedLedger"]

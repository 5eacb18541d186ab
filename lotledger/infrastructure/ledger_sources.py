"""Ledger sources wrapping the local storage and saved on-chain payloads."""

from collections.abc import Collection

from lotledger.application.ports.ledger_repository import LedgerRepositoryPort
from lotledger.application.ports.ledger_source import LedgerSourcePort
from lotledger.application.use_cases.import_onchain import (
    ImportOnchainTransactionsUseCase,
)
from lotledger.domain.models import LedgerEntry, SkipCounts
from lotledger.infrastructure.electrum_payloads import JsonFileTransactionResolver


class RepositoryLedgerSource(LedgerSourcePort):
    """Source returning the entries already stored in the ledger database."""

    def __init__(
        self,
        repository: LedgerRepositoryPort,
        name: str = "ledger-db",
    ) -> None:
        self.name = name
        self.skip_counts = SkipCounts()
        self._repository = repository

    def read_entries(self) -> list[LedgerEntry]:
        self._repository.prepare_storage()
        return self._repository.fetch_entries()


class OnchainLedgerSource(LedgerSourcePort):
    """Source classifying the saved transactions of the local wallet."""

    def __init__(
        self,
        resolver: JsonFileTransactionResolver,
        use_case: ImportOnchainTransactionsUseCase,
        known_addresses: Collection[str],
        name: str = "onchain",
    ) -> None:
        """Initialize the source.

        Args:
            resolver: Resolver over the saved payloads.
            use_case: Import use case sharing the same resolver.
            known_addresses: Addresses controlled by the local wallet.
            name: Source name used in diagnostics.
        """
        self.name = name
        self.skip_counts = SkipCounts()
        self._resolver = resolver
        self._use_case = use_case
        self._known_addresses = known_addresses

    def read_entries(self) -> list[LedgerEntry]:
        txids = self._resolver.related_txids(self._known_addresses)
        result = self._use_case.execute(txids)
        self.skip_counts = result.skipped
        return result.entries


__all__ = ["RepositoryLedgerSource", "OnchainLedgerSource"]

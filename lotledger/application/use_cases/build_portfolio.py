"""Use case building lot queues and history from a ledger."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime

from lotledger.domain.constants import (
    BASE_ASSET,
    BTC,
    COLD_STORAGE_WALLET,
    DEFAULT_UNRATED_BUDGET,
)
from lotledger.domain.models import (
    Asset,
    GroupedLedger,
    LedgerEntry,
    LedgerEntryType,
    Portfolio,
    PortfolioHistoryItem,
    SkipCounts,
    Transfer,
)
from lotledger.domain.services.balances import build_balances
from lotledger.domain.services.grouping import group_ledger_entries
from lotledger.domain.services.history import build_history
from lotledger.domain.services.validation import (
    BalanceVerification,
    index_entries,
    verify_balances,
)
from lotledger.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class PortfolioReport:
    """Outcome of a portfolio build.

    Attributes:
        portfolio: Lot queues by wallet and asset.
        grouped: Economic events in processing order.
        history: Daily snapshots of the history asset, oldest first.
        verification: Audit figures for the audited wallet.
        review_entries: Entries flagged for manual review.
        unresolved_transfers: Cross-wallet transfers applied unmatched.
        event_counts: Number of events by kind (single, trade, transfer).
        entry_count: Number of entries processed.
        skip_counts: On-chain inputs and outputs left out of the ledger.
    """

    portfolio: Portfolio
    grouped: list[GroupedLedger]
    history: list[PortfolioHistoryItem]
    verification: BalanceVerification
    review_entries: list[LedgerEntry] = field(default_factory=list)
    unresolved_transfers: list[Transfer] = field(default_factory=list)
    event_counts: dict[str, int] = field(default_factory=dict)
    entry_count: int = 0
    skip_counts: SkipCounts = field(default_factory=SkipCounts)

    @property
    def current(self) -> PortfolioHistoryItem:
        return self.history[-1]


class BuildPortfolioUseCase:
    """Group, fold, audit and replay a ledger."""

    def __init__(
        self,
        *,
        base_asset: Asset = BASE_ASSET,
        history_asset: Asset = BTC,
        audit_wallet: str = COLD_STORAGE_WALLET,
        unrated_budget=DEFAULT_UNRATED_BUDGET,
        strict_transfers: bool = True,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            base_asset: Unit of account, never tracked as lots.
            history_asset: Asset replayed into the daily history.
            audit_wallet: Wallet whose lots are verified.
            unrated_budget: Tolerated amount held without a rate.
            strict_transfers: Refuse cross-wallet transfers.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._base_asset = base_asset
        self._history_asset = history_asset
        self._audit_wallet = audit_wallet
        self._unrated_budget = unrated_budget
        self._strict_transfers = strict_transfers
        self._logger = logger or get_app_logger()

    def execute(
        self,
        entries: list[LedgerEntry],
        now: datetime | None = None,
        skip_counts: SkipCounts | None = None,
    ) -> PortfolioReport:
        """Build the portfolio report.

        Args:
            entries: Ledger entries from every source.
            now: Current instant used for the last history snapshot.
            skip_counts: Items the sources left out, reported as is.

        Returns:
            PortfolioReport: Lot queues, history and audit figures.

        Raises:
            DuplicateEntryError: If two entries share a global id.
            ClassificationError: If entries cannot be grouped.
            UnsupportedTransferError: On a cross-wallet transfer in strict
                mode.
        """
        index = index_entries(entries)
        grouped = group_ledger_entries(entries)
        event_counts = Counter(type(item).__name__.lower() for item in grouped)
        self._logger.info(
            f"Grouped {len(entries)} entries into {len(grouped)} events"
        )

        built = build_balances(
            grouped,
            logger=self._logger,
            base_asset=self._base_asset,
            strict_transfers=self._strict_transfers,
        )
        verification = verify_balances(
            built.portfolio,
            index.get,
            logger=self._logger,
            wallet=self._audit_wallet,
            asset=self._history_asset,
            unrated_budget=self._unrated_budget,
        )
        history = build_history(
            built.portfolio,
            index.get,
            asset=self._history_asset,
            now=now,
        )
        review_entries = [
            entry for entry in entries if entry.type is LedgerEntryType.TRANSFER
        ]
        if review_entries:
            self._logger.warning(
                f"{len(review_entries)} entries need manual review"
            )

        return PortfolioReport(
            portfolio=built.portfolio,
            grouped=grouped,
            history=history,
            verification=verification,
            review_entries=review_entries,
            unresolved_transfers=built.unresolved_transfers,
            event_counts=dict(event_counts),
            entry_count=len(entries),
            skip_counts=skip_counts or SkipCounts(),
        )


__all__ = ["BuildPortfolioUseCase", "PortfolioReport"]

"""Ledger integrity checks."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from decimal import Decimal
from logging import Logger

from lotledger.domain.constants import BTC, COLD_STORAGE_WALLET, DEFAULT_UNRATED_BUDGET
from lotledger.domain.exceptions import DuplicateEntryError
from lotledger.domain.models import (
    Asset,
    LedgerEntry,
    LedgerEntryType,
    Portfolio,
)
from lotledger.domain.services.fifo import queue_total
from lotledger.utils.decimal_utils import SATOSHI


def index_entries(entries: Iterable[LedgerEntry]) -> dict[str, LedgerEntry]:
    """Index entries by global id.

    Args:
        entries: Ledger entries from all sources.

    Returns:
        dict[str, LedgerEntry]: Entries keyed by ``wallet-id``.

    Raises:
        DuplicateEntryError: If two entries share a global id.
    """
    index: dict[str, LedgerEntry] = {}
    for entry in entries:
        if entry.global_id in index:
            raise DuplicateEntryError(entry.global_id)
        index[entry.global_id] = entry
    return index


@dataclass(frozen=True)
class BalanceVerification:
    """Audit figures for the lots held by one wallet.

    Attributes:
        wallet: Audited wallet.
        asset: Audited asset.
        total: Amount held.
        unrated: Amount held without a rate, income excluded.
        budget: Tolerated unrated amount.
        ref_count: Number of lots held.
        dust_count: Lots smaller than one satoshi.
        orphan_count: Lots whose ledger entry cannot be found.
    """

    wallet: str
    asset: Asset
    total: Decimal
    unrated: Decimal
    budget: Decimal
    ref_count: int
    dust_count: int
    orphan_count: int

    @property
    def within_budget(self) -> bool:
        return self.unrated < self.budget


def verify_balances(
    portfolio: Portfolio,
    get_entry: Callable[[str], LedgerEntry | None],
    *,
    logger: Logger,
    wallet: str = COLD_STORAGE_WALLET,
    asset: Asset = BTC,
    unrated_budget: Decimal = DEFAULT_UNRATED_BUDGET,
) -> BalanceVerification:
    """Check that the lots of a wallet look sane.

    Lots without a rate that do not come from interest or bonuses usually
    mean a transfer was not matched by the grouper. Their total is compared
    with ``unrated_budget``.

    Args:
        portfolio: Lot queues by wallet and asset.
        get_entry: Lookup from a lot's ``ref_id`` to its ledger entry.
        logger: Logger used for warnings.
        wallet: Wallet to audit.
        asset: Asset to audit.
        unrated_budget: Tolerated amount held without a rate.

    Returns:
        BalanceVerification: Audit figures for the wallet.
    """
    refs = list(portfolio.get(wallet, {}).get(asset, ()))

    unrated = Decimal("0")
    orphan_count = 0
    for ref in refs:
        entry = get_entry(ref.ref_id)
        if entry is None:
            logger.warning(f"Entry not found {ref.ref_id}")
            orphan_count += 1
            continue
        if ref.rate is None and entry.type not in (
            LedgerEntryType.BONUS,
            LedgerEntryType.INTEREST,
        ):
            unrated += ref.amount

    verification = BalanceVerification(
        wallet=wallet,
        asset=asset,
        total=queue_total(refs),
        unrated=unrated,
        budget=unrated_budget,
        ref_count=len(refs),
        dust_count=sum(1 for ref in refs if ref.amount < SATOSHI),
        orphan_count=orphan_count,
    )
    logger.info(
        f"{wallet} holds {verification.total} {asset.name} in "
        f"{verification.ref_count} lots, below 1 sat: {verification.dust_count}"
    )
    if not verification.within_budget:
        logger.warning(
            f"{wallet} holds {unrated} {asset.name} without rate "
            f"(budget {unrated_budget}), grouping may have missed transfers"
        )
    return verification


__all__ = ["index_entries", "BalanceVerification", "verify_balances"]

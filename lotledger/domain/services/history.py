"""Backward replay of held lots into a daily history."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from lotledger.domain.constants import BTC
from lotledger.domain.models import (
    Asset,
    LedgerEntry,
    LedgerEntryType,
    Portfolio,
    PortfolioHistoryItem,
    Ref,
)
from lotledger.domain.services.balances import iter_refs
from lotledger.domain.services.fifo import queue_total
from lotledger.utils.decimal_utils import sum_decimals

_INCOME_TYPES = (LedgerEntryType.BONUS, LedgerEntryType.INTEREST)


def build_history(
    portfolio: Portfolio,
    get_entry: Callable[[str], LedgerEntry | None],
    *,
    asset: Asset = BTC,
    now: datetime | None = None,
) -> list[PortfolioHistoryItem]:
    """Replay the held lots backward, one UTC day at a time.

    The snapshot of a day holds the totals at the end of that day. Lots are
    walked newest first in a single pass, so the history covers every day
    from the earliest lot to today, followed by a snapshot for ``now``.

    Args:
        portfolio: Lot queues by wallet and asset.
        get_entry: Lookup from a lot's ``ref_id`` to its ledger entry.
        asset: Asset to replay.
        now: Current instant, defaults to the current UTC time.

    Returns:
        list[PortfolioHistoryItem]: Snapshots from oldest to newest.
    """
    current = _as_utc(now or datetime.now(timezone.utc))

    def is_income(ref: Ref) -> bool:
        entry = get_entry(ref.ref_id)
        return entry is not None and entry.type in _INCOME_TYPES

    refs = sorted(iter_refs(portfolio, asset), key=lambda ref: _as_utc(ref.date))
    total = queue_total(refs)
    spent = sum_decimals(ref.cost for ref in refs if ref.cost is not None)
    bonus = queue_total(ref for ref in refs if is_income(ref))

    items = [PortfolioHistoryItem(date=current, total=total, bonus=bonus, spent=spent)]

    day = current.replace(hour=0, minute=0, second=0, microsecond=0)
    while refs:
        items.append(
            PortfolioHistoryItem(date=day, total=total, bonus=bonus, spent=spent)
        )
        while refs and _as_utc(refs[-1].date) >= day:
            ref = refs.pop()
            total -= ref.amount
            spent -= ref.cost if ref.cost is not None else Decimal("0")
            if is_income(ref):
                bonus -= ref.amount
        day -= timedelta(days=1)

    items.reverse()
    return items


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


__all__ = ["build_history"]

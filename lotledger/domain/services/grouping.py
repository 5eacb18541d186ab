"""Grouping of raw ledger entries into economic events.

Entries coming from independent sources are collapsed into three kinds of
events:

* trades, paired by the ``group_id`` their wallet gave them;
* transfers, a crypto withdrawal matched with a deposit of the same amount
  in another wallet;
* singles, for everything else.

Amount matching is a heuristic. Identical amounts moved on the same day are
kept apart by a greedy rule that opens a new bucket whenever the candidate
one is full or already holds an entry of the same type.
"""

from collections.abc import Iterable

from lotledger.domain.constants import AMOUNT_KEY_PLACES
from lotledger.domain.exceptions import AmbiguousTradeError, GroupingError
from lotledger.domain.models import (
    GroupedLedger,
    LedgerEntry,
    LedgerEntryType,
    Single,
    Trade,
    Transfer,
)
from lotledger.utils.decimal_utils import format_amount

_MATCHED_TYPES = (LedgerEntryType.DEPOSIT, LedgerEntryType.WITHDRAWAL)


def group_ledger_entries(entries: Iterable[LedgerEntry]) -> list[GroupedLedger]:
    """Group ledger entries into trades, transfers and singles.

    Entries are processed by ascending date; entries sharing a date keep
    their input order, which makes the result deterministic.

    Args:
        entries: Entries from all wallets and sources.

    Returns:
        list[GroupedLedger]: Events ordered by the date of their earliest
        entry.

    Raises:
        AmbiguousTradeError: If a trade pair has no single spend leg.
        GroupingError: If a group cannot be resolved.
    """
    ordered = sorted(entries, key=lambda entry: entry.date)

    buckets: dict[str, list[LedgerEntry]] = {}
    for index, entry in enumerate(ordered):
        key = _bucket_key(entry, index, buckets)
        buckets.setdefault(key, []).append(entry)

    groups = sorted(buckets.values(), key=lambda group: group[0].date)

    grouped: list[GroupedLedger] = []
    for group in groups:
        grouped.extend(_resolve_group(group))
    return grouped


def _bucket_key(
    entry: LedgerEntry,
    index: int,
    buckets: dict[str, list[LedgerEntry]],
) -> str:
    if entry.type is LedgerEntryType.TRADE:
        return f"trade:{entry.wallet}-{entry.group_id}"
    if entry.type in _MATCHED_TYPES and entry.asset.is_crypto:
        return _matching_key(entry, buckets)
    return f"single:{index}"


def _matching_key(
    entry: LedgerEntry,
    buckets: dict[str, list[LedgerEntry]],
) -> str:
    amount = format_amount(abs(entry.amount), AMOUNT_KEY_PLACES)
    key = f"match:{entry.asset.name}-{amount}"
    # Greedy: skip buckets that are full or already hold this entry type
    while key in buckets and (
        len(buckets[key]) >= 2 or buckets[key][0].type is entry.type
    ):
        key += "-"
    return key


def _resolve_group(group: list[LedgerEntry]) -> list[GroupedLedger]:
    if len(group) == 1:
        return [Single(entry=group[0])]

    if len(group) == 2:
        first, second = group
        if first.type is LedgerEntryType.TRADE and second.type is LedgerEntryType.TRADE:
            return [_build_trade(first, second)]
        if (
            {first.type, second.type} == set(_MATCHED_TYPES)
            and first.wallet != second.wallet
        ):
            if first.type is LedgerEntryType.WITHDRAWAL:
                return [Transfer(source=first, destination=second)]
            return [Transfer(source=second, destination=first)]
        if first.type is second.type or first.wallet == second.wallet:
            # Matched by amount by coincidence
            return [Single(entry=first), Single(entry=second)]

    raise GroupingError(f"Group has {len(group)} entries", group)


def _build_trade(first: LedgerEntry, second: LedgerEntry) -> Trade:
    first_spends = first.amount <= 0
    second_spends = second.amount <= 0
    if first_spends == second_spends:
        raise AmbiguousTradeError([first, second])
    if first_spends:
        return Trade(spend=first, receive=second)
    return Trade(spend=second, receive=first)


__all__ = ["group_ledger_entries"]

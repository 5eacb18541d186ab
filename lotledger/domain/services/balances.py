"""Folding grouped ledger events into per-wallet lot queues."""

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from logging import Logger

from lotledger.domain.constants import BASE_ASSET
from lotledger.domain.exceptions import GroupingError, UnsupportedTransferError
from lotledger.domain.models import (
    Asset,
    GroupedLedger,
    LedgerEntry,
    Portfolio,
    Ref,
    RefQueue,
    Single,
    Trade,
    Transfer,
)
from lotledger.domain.services.fifo import queue_total, subtract
from lotledger.utils.decimal_utils import sum_decimals


@dataclass(frozen=True)
class BalanceBuildResult:
    """Lot queues built from a grouped ledger.

    Attributes:
        portfolio: Lot queues by wallet and asset.
        unresolved_transfers: Cross-wallet transfers applied as unmatched
            entries because strict mode was disabled.
    """

    portfolio: Portfolio
    unresolved_transfers: list[Transfer] = field(default_factory=list)


def build_balances(
    grouped: Iterable[GroupedLedger],
    *,
    logger: Logger,
    base_asset: Asset = BASE_ASSET,
    strict_transfers: bool = True,
) -> BalanceBuildResult:
    """Fold grouped events, in order, into FIFO lot queues.

    Args:
        grouped: Events ordered by date.
        logger: Logger used for diagnostics.
        base_asset: Unit of account, never tracked as lots.
        strict_transfers: Raise on cross-wallet transfers instead of
            applying both legs as unmatched entries.

    Returns:
        BalanceBuildResult: Lot queues and unresolved transfers.

    Raises:
        UnsupportedTransferError: On a cross-wallet transfer in strict mode.
        InsufficientBalanceError: If an event spends more than is held.
        GroupingError: If a trade receives nothing.
    """
    portfolio: Portfolio = {}
    unresolved: list[Transfer] = []
    count = 0

    for event in grouped:
        count += 1
        if isinstance(event, Single):
            _apply_entry(portfolio, event.entry, base_asset)
        elif isinstance(event, Transfer):
            if event.source.wallet == event.destination.wallet:
                logger.debug(
                    f"noop internal transfer {event.source.wallet} "
                    f"{event.destination.amount} {event.destination.asset.name}"
                )
                continue
            if strict_transfers:
                raise UnsupportedTransferError(event)
            logger.warning(
                "Unresolved transfer "
                f"{event.source.global_id} -> {event.destination.global_id}"
            )
            unresolved.append(event)
            _apply_entry(portfolio, event.source, base_asset)
            _apply_entry(portfolio, event.destination, base_asset)
        elif isinstance(event, Trade):
            _apply_trade(portfolio, event, base_asset)
        else:
            raise TypeError(f"Unsupported grouped ledger event: {event!r}")

    logger.info(
        f"Built balances for {len(portfolio)} wallets from {count} events"
    )
    return BalanceBuildResult(portfolio=portfolio, unresolved_transfers=unresolved)


def _queue(portfolio: Portfolio, wallet: str, asset: Asset) -> RefQueue:
    return portfolio.setdefault(wallet, {}).setdefault(asset, deque())


def _apply_entry(
    portfolio: Portfolio,
    entry: LedgerEntry,
    base_asset: Asset,
) -> None:
    if entry.asset == base_asset:
        return
    if entry.amount > 0:
        _queue(portfolio, entry.wallet, entry.asset).append(
            Ref(
                wallet=entry.wallet,
                id=entry.id,
                amount=entry.amount,
                rate=None,
                date=entry.date,
            )
        )
    elif entry.amount < 0:
        # Consumed lots leave the wallet
        subtract(_queue(portfolio, entry.wallet, entry.asset), -entry.amount)


def _apply_trade(portfolio: Portfolio, trade: Trade, base_asset: Asset) -> None:
    spend, receive = trade.spend, trade.receive
    if receive.amount == 0:
        raise GroupingError("Trade receives nothing", [spend, receive])

    # Units of spend asset per unit of receive asset
    rate = -spend.amount / receive.amount

    if spend.asset != base_asset:
        consumed = subtract(
            _queue(portfolio, spend.wallet, spend.asset),
            -spend.amount,
        )
        if receive.asset == base_asset:
            return
        _queue(portfolio, receive.wallet, receive.asset).extend(
            Ref(
                wallet=ref.wallet,
                id=ref.id,
                amount=ref.amount / rate,
                rate=ref.rate * rate if ref.rate is not None else None,
                date=ref.date,
            )
            for ref in consumed
        )
        return

    if receive.asset != base_asset:
        _queue(portfolio, receive.wallet, receive.asset).append(
            Ref(
                wallet=receive.wallet,
                id=receive.id,
                amount=receive.amount,
                rate=rate,
                date=receive.date,
            )
        )


def iter_refs(portfolio: Portfolio, asset: Asset) -> list[Ref]:
    """Return the lots of ``asset`` held across all wallets."""
    return [
        ref
        for balance in portfolio.values()
        for ref in balance.get(asset, ())
    ]


def total_amount(portfolio: Portfolio, asset: Asset) -> Decimal:
    """Return the amount of ``asset`` held across all wallets."""
    return queue_total(iter_refs(portfolio, asset))


def total_spent(portfolio: Portfolio, asset: Asset) -> Decimal:
    """Return the acquisition cost of the rated lots of ``asset``."""
    return sum_decimals(
        ref.cost for ref in iter_refs(portfolio, asset) if ref.cost is not None
    )


__all__ = [
    "BalanceBuildResult",
    "build_balances",
    "iter_refs",
    "total_amount",
    "total_spent",
]

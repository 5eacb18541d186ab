"""FIFO consumption of cost-basis lots."""

from collections.abc import Iterable
from decimal import Decimal

from lotledger.domain.exceptions import (
    ConservationError,
    InsufficientBalanceError,
)
from lotledger.domain.models import Ref, RefQueue
from lotledger.utils.decimal_utils import sum_decimals


def queue_total(refs: Iterable[Ref]) -> Decimal:
    """Return the amount held by a collection of lots."""
    return sum_decimals(ref.amount for ref in refs)


def subtract(refs: RefQueue, amount: Decimal) -> list[Ref]:
    """Remove ``amount`` from a lot queue using the FIFO strategy.

    The oldest lots are consumed first. When the last consumed lot is larger
    than what is left to remove, it is split: the residual goes back to the
    front of the queue and the consumed part is returned. Both halves keep
    the original rate.

    Args:
        refs: Queue of lots, oldest first. Mutated in place.
        amount: Positive amount to remove.

    Returns:
        list[Ref]: Consumed lots, oldest first.

    Raises:
        ValueError: If ``amount`` is negative.
        InsufficientBalanceError: If the queue holds less than ``amount``.
        ConservationError: If the queue total is not preserved.
    """
    if amount < 0:
        raise ValueError(f"amount must be positive, got {amount}")

    balance_before = queue_total(refs)
    if balance_before < amount:
        raise InsufficientBalanceError(amount, balance_before)

    removed: list[Ref] = []
    total_removed = Decimal("0")
    while total_removed < amount:
        ref = refs.popleft()
        total_removed += ref.amount
        removed.append(ref)

    if total_removed > amount:
        left_on_balance = total_removed - amount
        last = removed.pop()
        refs.appendleft(last.with_amount(left_on_balance))
        removed.append(last.with_amount(last.amount - left_on_balance))

    balance_after = queue_total(refs) + queue_total(removed)
    if balance_after != balance_before:
        raise ConservationError(balance_before, balance_after)

    return removed


__all__ = ["queue_total", "subtract"]

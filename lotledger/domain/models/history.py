"""Domain models for portfolio history."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class PortfolioHistoryItem:
    """Daily snapshot of held lots.

    Attributes:
        date: Day boundary (UTC midnight) or the "now" instant.
        total: Amount held, bonus included.
        bonus: Amount held that originates from interest or bonus entries.
        spent: Acquisition cost of the lots that carry a rate.
    """

    date: datetime
    total: Decimal
    bonus: Decimal
    spent: Decimal


__all__ = ["PortfolioHistoryItem"]

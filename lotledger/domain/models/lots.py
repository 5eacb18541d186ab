"""Cost-basis lot models."""

from collections import deque
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal

from .ledger import Asset


@dataclass(frozen=True)
class Ref:
    """Dated lot of an asset with an optional acquisition rate.

    Attributes:
        wallet: Wallet of the entry that created the lot.
        id: Id of the entry that created the lot.
        amount: Positive amount held.
        rate: Acquisition price in base-asset terms, None when unknown.
        date: Date of the entry that created the lot.
    """

    wallet: str
    id: str
    amount: Decimal
    rate: Decimal | None
    date: datetime

    @property
    def ref_id(self) -> str:
        """Return the global id of the originating ledger entry."""
        return f"{self.wallet}-{self.id}"

    @property
    def cost(self) -> Decimal | None:
        """Return ``amount * rate`` or None when the rate is unknown."""
        if self.rate is None:
            return None
        return self.amount * self.rate

    def with_amount(self, amount: Decimal) -> "Ref":
        return replace(self, amount=amount)


RefQueue = deque[Ref]
Balance = dict[Asset, RefQueue]
Portfolio = dict[str, Balance]


__all__ = ["Ref", "RefQueue", "Balance", "Portfolio"]

"""Domain models for normalized ledger entries."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class AssetClass(str, Enum):
    """Kind of fungible unit held in a wallet."""

    FIAT = "fiat"
    CRYPTO = "crypto"


class LedgerEntryType(str, Enum):
    """Economic meaning of a ledger entry."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRADE = "trade"
    INTEREST = "interest"
    BONUS = "bonus"
    FEE = "fee"
    # Fallback for movements that could not be classified
    TRANSFER = "transfer"


@dataclass(frozen=True)
class Asset:
    """Fungible unit identified by name and class."""

    name: str
    asset_class: AssetClass

    @property
    def is_crypto(self) -> bool:
        return self.asset_class is AssetClass.CRYPTO


@dataclass(frozen=True)
class LedgerEntry:
    """Atomic economic fact recorded for a wallet.

    Attributes:
        wallet: Wallet (exchange account, cold storage...) holding the asset.
        id: Identifier unique within the wallet.
        group_id: Correlates entries coming from the same source transaction.
        date: Time the entry was booked.
        type: Economic meaning of the entry.
        amount: Signed amount, positive when holdings increase.
        asset: Asset the amount is denominated in.
    """

    wallet: str
    id: str
    group_id: str
    date: datetime
    type: LedgerEntryType
    amount: Decimal
    asset: Asset

    @property
    def global_id(self) -> str:
        """Return the ledger-wide identity of the entry."""
        return f"{self.wallet}-{self.id}"


__all__ = ["AssetClass", "LedgerEntryType", "Asset", "LedgerEntry"]

"""Domain constants for the ledger engine."""

from decimal import Decimal

from .models.ledger import Asset, AssetClass

BASE_ASSET = Asset(name="EUR", asset_class=AssetClass.FIAT)
BTC = Asset(name="BTC", asset_class=AssetClass.CRYPTO)

COLD_STORAGE_WALLET = "cold-storage"

# Fraction digits used when matching deposits and withdrawals by amount
AMOUNT_KEY_PLACES = 8

# Tolerated amount held without a known rate before grouping is suspicious
DEFAULT_UNRATED_BUDGET = Decimal("0.032")


__all__ = [
    "BASE_ASSET",
    "BTC",
    "COLD_STORAGE_WALLET",
    "AMOUNT_KEY_PLACES",
    "DEFAULT_UNRATED_BUDGET",
]

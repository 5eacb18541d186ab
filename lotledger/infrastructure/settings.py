"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
import os
from pathlib import Path
from typing import Optional

from lotledger.domain.constants import (
    BASE_ASSET,
    BTC,
    COLD_STORAGE_WALLET,
    DEFAULT_UNRATED_BUDGET,
)
from lotledger.domain.models import Asset, AssetClass
from lotledger.infrastructure.logging.logger import get_app_logger

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class LedgerSettings:
    """Settings for building the ledger.

    Attributes:
        base_currency: Unit of account, never tracked as lots.
        history_asset: Asset replayed into the daily history.
        cold_storage_wallet: Wallet name of on-chain entries, also audited.
        unrated_budget: Tolerated amount held without a rate.
        max_workers: Upper bound on concurrently read sources.
        strict_transfers: Refuse cross-wallet transfers.
        track_internal_outputs: Emit per-output pairs for internal
            on-chain movements.
        known_addresses_file: File listing the addresses of the wallet.
        transactions_dir: Directory of saved transaction payloads.
        ignored_ids: Global ids of entries to drop.
    """

    base_currency: Asset = BASE_ASSET
    history_asset: Asset = BTC
    cold_storage_wallet: str = COLD_STORAGE_WALLET
    unrated_budget: Decimal = DEFAULT_UNRATED_BUDGET
    max_workers: int = 4
    strict_transfers: bool = True
    track_internal_outputs: bool = True
    known_addresses_file: Optional[Path] = None
    transactions_dir: Optional[Path] = None
    ignored_ids: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_env(cls) -> "LedgerSettings":
        """Build settings from environment variables.

        Invalid values are logged and replaced by their default.

        Returns:
            LedgerSettings: Settings sourced from environment variables.
        """
        logger = get_app_logger()
        base_name = os.getenv("LEDGER_BASE_CURRENCY", "").strip().upper()
        history_name = os.getenv("LEDGER_HISTORY_ASSET", "").strip().upper()
        wallet = os.getenv("LEDGER_COLD_STORAGE_WALLET", "").strip()
        return cls(
            base_currency=(
                Asset(base_name, AssetClass.FIAT) if base_name else BASE_ASSET
            ),
            history_asset=(
                Asset(history_name, AssetClass.CRYPTO) if history_name else BTC
            ),
            cold_storage_wallet=wallet or COLD_STORAGE_WALLET,
            unrated_budget=cls._decimal_env(
                "LEDGER_UNRATED_BUDGET",
                DEFAULT_UNRATED_BUDGET,
                logger=logger,
            ),
            max_workers=cls._int_env("LEDGER_MAX_WORKERS", 4, logger=logger),
            strict_transfers=cls._bool_env(
                "LEDGER_STRICT_TRANSFERS",
                True,
                logger=logger,
            ),
            track_internal_outputs=cls._bool_env(
                "LEDGER_TRACK_INTERNAL_OUTPUTS",
                True,
                logger=logger,
            ),
            known_addresses_file=cls._path_env(
                "LEDGER_KNOWN_ADDRESSES_FILE",
                logger=logger,
            ),
            transactions_dir=cls._path_env(
                "LEDGER_TRANSACTIONS_DIR",
                logger=logger,
            ),
            ignored_ids=frozenset(
                item.strip()
                for item in os.getenv("LEDGER_IGNORED_IDS", "").split(",")
                if item.strip()
            ),
        )

    @staticmethod
    def _bool_env(name: str, default: bool, logger) -> bool:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        value = raw.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        logger.warning(f"Invalid boolean {name}={raw}, using {default}")
        return default

    @staticmethod
    def _int_env(name: str, default: int, logger) -> int:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError:
            logger.warning(f"Invalid integer {name}={raw}, using {default}")
            return default
        if value < 1:
            logger.warning(f"{name} must be positive, using {default}")
            return default
        return value

    @staticmethod
    def _decimal_env(name: str, default: Decimal, logger) -> Decimal:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = Decimal(raw.strip())
        except InvalidOperation:
            logger.warning(f"Invalid decimal {name}={raw}, using {default}")
            return default
        if not value.is_finite() or value < 0:
            logger.warning(f"{name} must be a positive amount, using {default}")
            return default
        return value

    @staticmethod
    def _path_env(name: str, logger) -> Path | None:
        """Resolve a path from the environment.

        Args:
            name: Name of the environment variable to read.
            logger: Logger used for warnings.

        Returns:
            Path | None: Resolved path, None when unset.
        """
        raw = os.getenv(name)
        if not raw:
            return None
        path = Path(raw).expanduser().resolve()
        if not path.exists():
            logger.warning(f"{name} does not exist at {path}")
        return path


__all__ = ["LedgerSettings"]

"""SQLAlchemy repository storing normalized ledger entries."""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import bindparam, text

from lotledger.application.ports.database import DatabaseEnginePort
from lotledger.application.ports.ledger_repository import LedgerRepositoryPort
from lotledger.domain.models import (
    Asset,
    AssetClass,
    LedgerEntry,
    LedgerEntryType,
)


CREATE_LEDGER_ENTRIES_SQL = """
CREATE TABLE IF NOT EXISTS ledger_entries (
    global_id TEXT PRIMARY KEY,
    wallet TEXT NOT NULL,
    entry_id TEXT NOT NULL,
    group_id TEXT NOT NULL,
    booked_at TEXT NOT NULL,
    entry_type TEXT NOT NULL,
    amount TEXT NOT NULL,
    asset_name TEXT NOT NULL,
    asset_class TEXT NOT NULL
)
"""

DELETE_LEDGER_ENTRIES_SQL = text(
    """
    DELETE FROM ledger_entries
    WHERE global_id IN :global_ids
    """
).bindparams(bindparam("global_ids", expanding=True))

INSERT_LEDGER_ENTRIES_SQL = text(
    """
    INSERT INTO ledger_entries (
        global_id,
        wallet,
        entry_id,
        group_id,
        booked_at,
        entry_type,
        amount,
        asset_name,
        asset_class
    )
    VALUES (
        :global_id,
        :wallet,
        :entry_id,
        :group_id,
        :booked_at,
        :entry_type,
        :amount,
        :asset_name,
        :asset_class
    )
    """
)

SELECT_LEDGER_ENTRIES_SQL = text(
    """
    SELECT wallet, entry_id, group_id, booked_at, entry_type, amount,
           asset_name, asset_class
    FROM ledger_entries
    ORDER BY booked_at, wallet, entry_id
    """
)


class SqlAlchemyLedgerRepository(LedgerRepositoryPort):
    """Ledger storage backed by SQLAlchemy.

    Amounts are stored as decimal strings so they round-trip exactly, and
    dates as UTC ISO-8601 strings so they sort chronologically.
    """

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the ledger engine.
        """
        self._db_port = db_port

    def prepare_storage(self) -> None:
        """Ensure the ledger_entries table exists."""
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            conn.exec_driver_sql(CREATE_LEDGER_ENTRIES_SQL)

    def upsert_entries(self, entries: list[LedgerEntry]) -> int:
        """Replace stored entries sharing a global id with the given ones.

        Args:
            entries: Entries to write.

        Returns:
            int: Number of entries written.
        """
        if not entries:
            return 0
        payload = [_entry_to_row(entry) for entry in entries]
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            conn.execute(
                DELETE_LEDGER_ENTRIES_SQL,
                {"global_ids": [row["global_id"] for row in payload]},
            )
            conn.execute(INSERT_LEDGER_ENTRIES_SQL, payload)
        return len(payload)

    def fetch_entries(self) -> list[LedgerEntry]:
        """Return every stored entry, oldest first.

        Returns:
            list[LedgerEntry]: Entries rebuilt from the stored rows.
        """
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            rows = conn.execute(SELECT_LEDGER_ENTRIES_SQL).all()
        return [
            LedgerEntry(
                wallet=row.wallet,
                id=row.entry_id,
                group_id=row.group_id,
                date=datetime.fromisoformat(row.booked_at),
                type=LedgerEntryType(row.entry_type),
                amount=Decimal(row.amount),
                asset=Asset(
                    name=row.asset_name,
                    asset_class=AssetClass(row.asset_class),
                ),
            )
            for row in rows
        ]


def _entry_to_row(entry: LedgerEntry) -> dict[str, str]:
    date = entry.date
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    return {
        "global_id": entry.global_id,
        "wallet": entry.wallet,
        "entry_id": entry.id,
        "group_id": entry.group_id,
        "booked_at": date.astimezone(timezone.utc).isoformat(),
        "entry_type": entry.type.value,
        "amount": str(entry.amount),
        "asset_name": entry.asset.name,
        "asset_class": entry.asset.asset_class.value,
    }


__all__ = [
    "SqlAlchemyLedgerRepository",
    "CREATE_LEDGER_ENTRIES_SQL",
    "DELETE_LEDGER_ENTRIES_SQL",
    "INSERT_LEDGER_ENTRIES_SQL",
    "SELECT_LEDGER_ENTRIES_SQL",
]

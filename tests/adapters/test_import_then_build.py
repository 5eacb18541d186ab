"""End-to-end run of the import command followed by the build command."""

import json
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine, text

from lotledger.adapters import build_portfolio_cli, import_onchain_cli
from lotledger.infrastructure import container, db as db_module
from lotledger.infrastructure import settings as settings_module

DEPOSIT = {
    "txid": "fund",
    "time": 1_700_000_000,
    "vin": [{"txid": "outside", "vout": 3}],
    "vout": [{"n": 0, "value": 1.0, "scriptPubKey": {"address": "bc1-mine"}}],
}


@pytest.fixture
def ledger_env(monkeypatch, tmp_path):
    """Point both commands at a temporary database and payload directory."""
    payloads = tmp_path / "payloads"
    payloads.mkdir()
    (payloads / "fund.json").write_text(json.dumps(DEPOSIT), encoding="utf-8")
    addresses = tmp_path / "addresses.txt"
    addresses.write_text("bc1-mine\n", encoding="utf-8")
    db_path = tmp_path / "ledger.db"

    for name in (
        "LEDGER_BASE_CURRENCY",
        "LEDGER_HISTORY_ASSET",
        "LEDGER_COLD_STORAGE_WALLET",
        "LEDGER_IGNORED_IDS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LEDGER_DB_URL", f"sqlite:///{db_path}")
    monkeypatch.setenv("LEDGER_TRANSACTIONS_DIR", str(payloads))
    monkeypatch.setenv("LEDGER_KNOWN_ADDRESSES_FILE", str(addresses))

    fake_logger = MagicMock()
    for module in (
        import_onchain_cli,
        build_portfolio_cli,
        container,
        settings_module,
    ):
        monkeypatch.setattr(module, "get_app_logger", lambda: fake_logger)
    monkeypatch.setattr(db_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.setattr(db_module, "_ledger_engine", None)
    monkeypatch.setattr(
        db_module,
        "_create_engine",
        lambda url: create_engine(
            url,
            connect_args={"check_same_thread": False},
            future=True,
        ),
    )

    yield db_path

    if db_module._ledger_engine is not None:
        db_module._ledger_engine.dispose()


def test_build_after_import_reads_stored_onchain_entries_once(
    ledger_env,
    capsys,
):
    """Stored on-chain entries and the re-read payloads should not collide."""
    import_onchain_cli.main()
    imported = capsys.readouterr().out

    build_portfolio_cli.main()
    built = capsys.readouterr().out

    assert "Imported 1 transactions, stored 1 entries." in imported
    assert "Skipped inputs: 1, skipped outputs: 0" in imported
    assert "Total: 1.00000000 BTC" in built
    assert "cold-storage: 1 lots" in built
    assert "Skipped inputs: 1, skipped outputs: 0, entries to review: 0" in built

    engine = create_engine(f"sqlite:///{ledger_env}")
    with engine.connect() as conn:
        stored = conn.execute(
            text("SELECT global_id FROM ledger_entries")
        ).scalars().all()
    engine.dispose()
    assert stored == ["cold-storage-fund"]

"""Tests for the import_onchain_cli adapter."""

from types import SimpleNamespace
from unittest.mock import MagicMock

from lotledger.adapters import import_onchain_cli
from lotledger.domain.models import SkipCounts


def test_main_imports_and_stores_entries(monkeypatch, capsys):
    """The CLI should classify related transactions and upsert them."""
    fake_logger = MagicMock()
    settings = object()
    resolver = MagicMock()
    resolver.related_txids.return_value = ["t1", "t2"]
    use_case = MagicMock()
    use_case.execute.return_value = SimpleNamespace(
        classifications=[object(), object()],
        entries=["e1", "e2", "e3"],
        missing_txids=[],
        review_txids=["t2"],
        skipped=SkipCounts(inputs=1, outputs=0),
    )
    repository = object()
    sync = MagicMock()
    sync.run.return_value = SimpleNamespace(upserted_count=3)

    monkeypatch.setattr(import_onchain_cli, "get_app_logger", lambda: fake_logger)
    monkeypatch.setattr(
        import_onchain_cli.LedgerSettings, "from_env", lambda: settings
    )
    monkeypatch.setattr(
        import_onchain_cli,
        "build_import_onchain_use_case",
        lambda value: (resolver, use_case),
    )
    monkeypatch.setattr(
        import_onchain_cli,
        "build_known_addresses",
        lambda value: frozenset({"bc1a"}),
    )
    monkeypatch.setattr(
        import_onchain_cli, "build_ledger_repository", lambda: repository
    )

    def _fake_sync(repository, logger):
        assert logger is fake_logger
        return sync

    monkeypatch.setattr(import_onchain_cli, "SyncLedgerUseCase", _fake_sync)

    import_onchain_cli.main()

    resolver.related_txids.assert_called_once_with(frozenset({"bc1a"}))
    use_case.execute.assert_called_once_with(["t1", "t2"])
    sync.run.assert_called_once_with(["e1", "e2", "e3"])
    captured = capsys.readouterr()
    assert "Imported 2 transactions, stored 3 entries." in captured.out
    assert "Needs review: t2" in captured.out
    assert (
        "Skipped inputs: 1, skipped outputs: 0, ambiguous transactions: 1"
        in captured.out
    )


def test_main_logs_configuration_errors(monkeypatch, capsys):
    """A missing payload directory should be logged, not raised."""
    fake_logger = MagicMock()
    monkeypatch.setattr(import_onchain_cli, "get_app_logger", lambda: fake_logger)
    monkeypatch.setattr(
        import_onchain_cli.LedgerSettings, "from_env", lambda: object()
    )

    def _raise(value):
        raise RuntimeError("no payloads")

    monkeypatch.setattr(import_onchain_cli, "build_import_onchain_use_case", _raise)

    import_onchain_cli.main()

    fake_logger.error.assert_called_once_with("no payloads")
    assert capsys.readouterr().out == ""

"""Tests for the build_portfolio_cli adapter."""

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

from lotledger.adapters import build_portfolio_cli
from lotledger.domain.models import PortfolioHistoryItem, SkipCounts
from lotledger.infrastructure.settings import LedgerSettings


def test_main_prints_portfolio_summary(monkeypatch, capsys):
    """The CLI should collect, build and print totals and audit counts."""
    skip_counts = SkipCounts(inputs=2, outputs=1)
    collected = SimpleNamespace(
        entries=["e1"],
        missing_ignored_ids=["x-1"],
        skip_counts=skip_counts,
    )
    collect = MagicMock()
    collect.execute.return_value = collected
    report = SimpleNamespace(
        entry_count=1,
        event_counts={"single": 1},
        current=PortfolioHistoryItem(
            date=datetime(2024, 1, 1, tzinfo=timezone.utc),
            total=Decimal("1.5"),
            bonus=Decimal("0.01"),
            spent=Decimal("45000"),
        ),
        verification=SimpleNamespace(
            wallet="cold-storage",
            ref_count=3,
            dust_count=0,
            unrated=Decimal("0"),
            orphan_count=0,
        ),
        review_entries=["t1"],
        unresolved_transfers=[],
        skip_counts=skip_counts,
    )
    build = MagicMock()
    build.execute.return_value = report

    monkeypatch.setattr(build_portfolio_cli, "get_app_logger", lambda: MagicMock())
    monkeypatch.setattr(
        build_portfolio_cli.LedgerSettings, "from_env", lambda: LedgerSettings()
    )
    monkeypatch.setattr(
        build_portfolio_cli, "build_collect_ledger_use_case", lambda s: collect
    )
    monkeypatch.setattr(
        build_portfolio_cli, "build_portfolio_use_case", lambda s: build
    )

    build_portfolio_cli.main()

    build.execute.assert_called_once_with(["e1"], skip_counts=skip_counts)
    out = capsys.readouterr().out
    assert "Total: 1.50000000 BTC" in out
    assert "Cost basis: 45000.00 EUR" in out
    assert "cold-storage: 3 lots" in out
    assert "Ignored ids not found: x-1" in out
    assert (
        "Skipped inputs: 2, skipped outputs: 1, entries to review: 1" in out
    )

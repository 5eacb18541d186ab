"""Tests for the balance builder."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from lotledger.domain.constants import BASE_ASSET, BTC
from lotledger.domain.exceptions import (
    GroupingError,
    InsufficientBalanceError,
    UnsupportedTransferError,
)
from lotledger.domain.models import (
    Asset,
    AssetClass,
    LedgerEntry,
    LedgerEntryType,
    Ref,
    Single,
    Trade,
    Transfer,
)
from lotledger.domain.services.balances import (
    build_balances,
    total_amount,
    total_spent,
)

ETH = Asset("ETH", AssetClass.CRYPTO)
START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _entry(
    entry_id: str,
    entry_type: LedgerEntryType,
    amount: str,
    asset: Asset = BTC,
    wallet: str = "kraken",
    day: int = 0,
) -> LedgerEntry:
    return LedgerEntry(
        wallet=wallet,
        id=entry_id,
        group_id=entry_id,
        date=START + timedelta(days=day),
        type=entry_type,
        amount=Decimal(amount),
        asset=asset,
    )


def _buy(entry_id: str, eur: str, btc: str, day: int = 0) -> Trade:
    return Trade(
        spend=_entry(f"{entry_id}-eur", LedgerEntryType.TRADE, f"-{eur}",
                     BASE_ASSET, day=day),
        receive=_entry(f"{entry_id}-btc", LedgerEntryType.TRADE, btc, day=day),
    )


def test_fiat_purchase_creates_rated_lot():
    """Buying with the base asset should record the price paid."""
    result = build_balances([_buy("b1", "20000", "0.5")], logger=MagicMock())

    refs = list(result.portfolio["kraken"][BTC])
    assert refs == [
        Ref(
            wallet="kraken",
            id="b1-btc",
            amount=Decimal("0.5"),
            rate=Decimal("40000"),
            date=START,
        )
    ]
    assert BASE_ASSET not in result.portfolio["kraken"]


def test_crypto_trade_propagates_rate_to_received_lots():
    """Spending 1 BTC bought at 10000 for 2 ETH yields ETH at 5000."""
    swap = Trade(
        spend=_entry("s1", LedgerEntryType.TRADE, "-1", day=1),
        receive=_entry("s2", LedgerEntryType.TRADE, "2", ETH, day=1),
    )

    result = build_balances(
        [_buy("b1", "10000", "1"), swap],
        logger=MagicMock(),
    )

    eth_refs = list(result.portfolio["kraken"][ETH])
    assert len(eth_refs) == 1
    assert eth_refs[0].amount == Decimal("2")
    assert eth_refs[0].rate == Decimal("5000")
    # Provenance of the consumed lot is kept
    assert eth_refs[0].id == "b1-btc"
    assert eth_refs[0].date == START
    assert not result.portfolio["kraken"][BTC]


def test_crypto_trade_keeps_unknown_rate_unknown():
    """Lots without a rate stay without a rate after a trade."""
    deposit = Single(entry=_entry("d1", LedgerEntryType.DEPOSIT, "1"))
    swap = Trade(
        spend=_entry("s1", LedgerEntryType.TRADE, "-1", day=1),
        receive=_entry("s2", LedgerEntryType.TRADE, "20", ETH, day=1),
    )

    result = build_balances([deposit, swap], logger=MagicMock())

    (ref,) = result.portfolio["kraken"][ETH]
    assert ref.amount == Decimal("20")
    assert ref.rate is None


def test_sale_to_base_asset_discards_consumed_lots():
    """Selling for fiat should only shrink the crypto queue."""
    sale = Trade(
        spend=_entry("s1", LedgerEntryType.TRADE, "-0.4", day=1),
        receive=_entry("s2", LedgerEntryType.TRADE, "9000", BASE_ASSET, day=1),
    )

    result = build_balances([_buy("b1", "10000", "1"), sale], logger=MagicMock())

    assert total_amount(result.portfolio, BTC) == Decimal("0.6")
    assert total_spent(result.portfolio, BTC) == Decimal("6000")
    assert BASE_ASSET not in result.portfolio["kraken"]


def test_singles_add_and_remove_lots():
    """Positive singles append unrated lots, negative ones consume FIFO."""
    events = [
        Single(entry=_entry("i1", LedgerEntryType.INTEREST, "0.01")),
        Single(entry=_entry("d1", LedgerEntryType.DEPOSIT, "0.5", day=1)),
        Single(entry=_entry("f1", LedgerEntryType.FEE, "-0.02", day=2)),
    ]

    result = build_balances(events, logger=MagicMock())

    refs = list(result.portfolio["kraken"][BTC])
    assert [(ref.id, ref.amount) for ref in refs] == [("d1", Decimal("0.49"))]
    assert all(ref.rate is None for ref in refs)


def test_base_asset_singles_are_ignored():
    """Fiat deposits are not tracked as lots."""
    events = [Single(entry=_entry("e1", LedgerEntryType.DEPOSIT, "500", BASE_ASSET))]

    result = build_balances(events, logger=MagicMock())

    assert result.portfolio == {}


def test_overdraw_raises_insufficient_balance():
    """Spending more than held should fail loudly."""
    events = [
        Single(entry=_entry("d1", LedgerEntryType.DEPOSIT, "0.1")),
        Single(entry=_entry("w1", LedgerEntryType.WITHDRAWAL, "-0.2", day=1)),
    ]

    with pytest.raises(InsufficientBalanceError):
        build_balances(events, logger=MagicMock())


def test_same_wallet_transfer_is_a_noop():
    """A transfer within one wallet should not move lots."""
    transfer = Transfer(
        source=_entry("w1", LedgerEntryType.WITHDRAWAL, "-1"),
        destination=_entry("d1", LedgerEntryType.DEPOSIT, "1"),
    )
    logger = MagicMock()

    result = build_balances([_buy("b1", "100", "1"), transfer], logger=logger)

    assert total_amount(result.portfolio, BTC) == Decimal("1")
    logger.debug.assert_called_once()


def test_cross_wallet_transfer_is_refused_in_strict_mode():
    """Moving lots between wallets is not supported."""
    transfer = Transfer(
        source=_entry("w1", LedgerEntryType.WITHDRAWAL, "-1"),
        destination=_entry("d1", LedgerEntryType.DEPOSIT, "1", wallet="cold"),
    )

    with pytest.raises(UnsupportedTransferError) as excinfo:
        build_balances([_buy("b1", "100", "1"), transfer], logger=MagicMock())

    assert isinstance(excinfo.value, NotImplementedError)
    assert excinfo.value.transfer is transfer


def test_cross_wallet_transfer_is_applied_unmatched_when_not_strict():
    """Lenient mode should apply both legs and report the transfer."""
    transfer = Transfer(
        source=_entry("w1", LedgerEntryType.WITHDRAWAL, "-1", day=1),
        destination=_entry("d1", LedgerEntryType.DEPOSIT, "1", wallet="cold",
                           day=1),
    )
    logger = MagicMock()

    result = build_balances(
        [_buy("b1", "100", "1"), transfer],
        logger=logger,
        strict_transfers=False,
    )

    assert result.unresolved_transfers == [transfer]
    assert not result.portfolio["kraken"][BTC]
    (ref,) = result.portfolio["cold"][BTC]
    assert ref.id == "d1"
    assert ref.rate is None
    logger.warning.assert_called_once()


def test_trade_receiving_nothing_is_rejected():
    """A zero receive amount has no rate."""
    trade = Trade(
        spend=_entry("s1", LedgerEntryType.TRADE, "-10", BASE_ASSET),
        receive=_entry("s2", LedgerEntryType.TRADE, "0"),
    )

    with pytest.raises(GroupingError):
        build_balances([trade], logger=MagicMock())


def test_folding_the_same_ledger_twice_gives_the_same_portfolio():
    """The fold should be a pure function of the grouped sequence."""
    grouped = [
        _buy("b1", "30000", "1", day=0),
        Single(entry=_entry("int", LedgerEntryType.INTEREST, "0.00000015", day=1)),
        _buy("b2", "1500", "0.05", day=2),
        Trade(
            spend=_entry("x-btc", LedgerEntryType.TRADE, "-0.3", day=3),
            receive=_entry("x-eth", LedgerEntryType.TRADE, "4.5", ETH, day=3),
        ),
        Single(entry=_entry("fee", LedgerEntryType.FEE, "-0.00000005", day=4)),
        Single(
            entry=_entry("out", LedgerEntryType.WITHDRAWAL, "-0.7", day=5)
        ),
    ]

    first = build_balances(grouped, logger=MagicMock())
    second = build_balances(grouped, logger=MagicMock())

    assert first == second
    assert list(first.portfolio) == list(second.portfolio)
    assert {
        wallet: {asset: list(refs) for asset, refs in balance.items()}
        for wallet, balance in first.portfolio.items()
    } == {
        wallet: {asset: list(refs) for asset, refs in balance.items()}
        for wallet, balance in second.portfolio.items()
    }

"""Tests for the on-chain import use case."""

from decimal import Decimal
from unittest.mock import MagicMock

from lotledger.application.use_cases.import_onchain import (
    ImportOnchainTransactionsUseCase,
    OnchainClassifier,
)
from lotledger.domain.models import (
    LedgerEntryType,
    RawTransaction,
    SkipCounts,
    TransactionKind,
    TxInput,
    TxOutput,
)

KNOWN = {"bc1-mine", "bc1-change"}


class FakeResolver:
    """In-memory resolver keyed by txid."""

    def __init__(self, transactions):
        self._transactions = {tx.txid: tx for tx in transactions}

    def get_transaction(self, txid):
        return self._transactions.get(txid)


FUNDING = RawTransaction(
    txid="fund",
    time=1_700_000_000,
    vin=[TxInput(txid="outside", vout=3)],
    vout=[TxOutput(n=0, value=Decimal("1.0"), address="bc1-mine")],
)
SPEND = RawTransaction(
    txid="spend",
    time=1_700_100_000,
    vin=[TxInput(txid="fund", vout=0)],
    vout=[
        TxOutput(n=0, value=Decimal("0.3"), address="bc1-shop"),
        TxOutput(n=1, value=Decimal("0.6999"), address="bc1-change"),
    ],
)


def test_classifier_resolves_inputs_through_resolver():
    """Inputs should be resolved to the output they spend."""
    classifier = OnchainClassifier(
        FakeResolver([FUNDING, SPEND]),
        KNOWN,
        logger=MagicMock(),
    )

    result = classifier.classify(SPEND)

    assert result.kind is TransactionKind.WITHDRAWAL
    assert result.fee == Decimal("0.0001")
    assert [(entry.type, entry.amount) for entry in result.entries] == [
        (LedgerEntryType.WITHDRAWAL, Decimal("-0.3")),
        (LedgerEntryType.FEE, Decimal("-0.0001")),
    ]


def test_classifier_skips_inputs_it_cannot_resolve():
    """Missing previous transactions are logged and counted."""
    logger = MagicMock()
    classifier = OnchainClassifier(FakeResolver([FUNDING]), KNOWN, logger=logger)

    result = classifier.classify(FUNDING)

    assert result.skipped_inputs == 1
    assert result.kind is TransactionKind.DEPOSIT
    logger.warning.assert_called_once()


def test_classifier_skips_coinbase_inputs():
    """Inputs without a previous output reference cannot be resolved."""
    coinbase = RawTransaction(
        txid="cb",
        time=1,
        vin=[TxInput(txid=None, vout=None)],
        vout=[TxOutput(n=0, value=Decimal("6.25"), address="bc1-mine")],
    )

    result = OnchainClassifier(
        FakeResolver([]), KNOWN, logger=MagicMock()
    ).classify(coinbase)

    assert result.skipped_inputs == 1
    assert [entry.amount for entry in result.entries] == [Decimal("6.25")]


def test_execute_reports_missing_and_review_transactions():
    """Unknown txids and ambiguous transactions should be surfaced."""
    mixed = RawTransaction(
        txid="mixed",
        time=1_700_200_000,
        vin=[TxInput(txid="fund", vout=0), TxInput(txid="outside", vout=0)],
        vout=[TxOutput(n=0, value=Decimal("1.5"), address="bc1-shop")],
    )
    outside = RawTransaction(
        txid="outside",
        time=1,
        vin=[],
        vout=[TxOutput(n=0, value=Decimal("0.6"), address="bc1-stranger")],
    )
    use_case = ImportOnchainTransactionsUseCase(
        FakeResolver([FUNDING, SPEND, mixed, outside]),
        KNOWN,
        wallet="trezor",
        logger=MagicMock(),
    )

    result = use_case.execute(["fund", "spend", "mixed", "nope"])

    assert result.missing_txids == ["nope"]
    assert result.review_txids == ["mixed"]
    assert [entry.global_id for entry in result.entries] == [
        "trezor-fund",
        "trezor-spend-0",
        "trezor-spend-1",
        "trezor-mixed",
    ]


def test_execute_totals_skipped_inputs_and_outputs():
    """Skipped items of every transaction should add up in the result."""
    opaque = RawTransaction(
        txid="opaque",
        time=1_700_300_000,
        vin=[TxInput(txid=None, vout=None)],
        vout=[
            TxOutput(n=0, value=Decimal("0.2"), address="bc1-mine"),
            TxOutput(n=1, value=Decimal("0"), address=None),
        ],
    )
    use_case = ImportOnchainTransactionsUseCase(
        FakeResolver([FUNDING, SPEND, opaque]),
        KNOWN,
        logger=MagicMock(),
    )

    result = use_case.execute(["fund", "spend", "opaque"])

    assert result.skipped == SkipCounts(inputs=2, outputs=1)

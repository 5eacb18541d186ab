"""Use case turning raw on-chain transactions into ledger entries."""

from collections.abc import Collection, Iterable
from dataclasses import dataclass, field

from lotledger.application.ports.transactions import TransactionResolverPort
from lotledger.domain.constants import BTC, COLD_STORAGE_WALLET
from lotledger.domain.models import (
    Asset,
    LedgerEntry,
    OnchainClassification,
    RawTransaction,
    ResolvedInput,
    SkipCounts,
)
from lotledger.domain.services.onchain import classify_transaction
from lotledger.infrastructure.logging.logger import get_app_logger


class OnchainClassifier:
    """Resolve the inputs of a transaction and classify it."""

    def __init__(
        self,
        resolver: TransactionResolverPort,
        known_addresses: Collection[str],
        *,
        wallet: str = COLD_STORAGE_WALLET,
        asset: Asset = BTC,
        track_internal_outputs: bool = True,
        logger=None,
    ) -> None:
        """Initialize the classifier.

        Args:
            resolver: Port returning the transactions spent by the inputs.
            known_addresses: Addresses controlled by the local wallet.
            wallet: Wallet name given to the emitted entries.
            asset: Asset moved by the transactions.
            track_internal_outputs: Emit per-output pairs for internal
                movements instead of the fee alone.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._resolver = resolver
        self._known_addresses = frozenset(known_addresses)
        self._wallet = wallet
        self._asset = asset
        self._track_internal_outputs = track_internal_outputs
        self._logger = logger or get_app_logger()

    def classify(self, transaction: RawTransaction) -> OnchainClassification:
        """Classify a transaction relative to the known addresses.

        Args:
            transaction: Raw transaction to classify.

        Returns:
            OnchainClassification: Kind, entries and fee of the transaction.
        """
        resolved, skipped = self._resolve_inputs(transaction)
        return classify_transaction(
            transaction,
            resolved,
            self._known_addresses,
            logger=self._logger,
            wallet=self._wallet,
            asset=self._asset,
            track_internal_outputs=self._track_internal_outputs,
            skipped_inputs=skipped,
        )

    def _resolve_inputs(
        self,
        transaction: RawTransaction,
    ) -> tuple[list[ResolvedInput], int]:
        resolved: list[ResolvedInput] = []
        skipped = 0
        for vin in transaction.vin:
            if vin.txid is None or vin.vout is None:
                self._logger.warning(
                    f"{transaction.txid} has an input without reference"
                )
                skipped += 1
                continue
            previous = self._resolver.get_transaction(vin.txid)
            if previous is None:
                self._logger.warning(
                    f"Transaction {vin.txid} spent by {transaction.txid} "
                    "not found"
                )
                skipped += 1
                continue
            output = next(
                (vout for vout in previous.vout if vout.n == vin.vout),
                None,
            )
            if output is None or not output.address:
                self._logger.warning(
                    f"Output {vin.txid}:{vin.vout} spent by "
                    f"{transaction.txid} has no address"
                )
                skipped += 1
                continue
            resolved.append(
                ResolvedInput(
                    txid=vin.txid,
                    vout=vin.vout,
                    value=output.value,
                    address=output.address,
                )
            )
        return resolved, skipped


@dataclass(frozen=True)
class OnchainImportResult:
    """Result of an on-chain import.

    Attributes:
        classifications: One classification per resolved transaction.
        missing_txids: Requested transactions the resolver did not know.

    The `skipped` property totals the inputs and outputs the classifications
    left out.
    """

    classifications: list[OnchainClassification]
    missing_txids: list[str] = field(default_factory=list)

    @property
    def entries(self) -> list[LedgerEntry]:
        return [
            entry
            for classification in self.classifications
            for entry in classification.entries
        ]

    @property
    def review_txids(self) -> list[str]:
        return [
            classification.txid
            for classification in self.classifications
            if classification.needs_review
        ]

    @property
    def skipped(self) -> SkipCounts:
        return SkipCounts(
            inputs=sum(item.skipped_inputs for item in self.classifications),
            outputs=sum(item.skipped_outputs for item in self.classifications),
        )


class ImportOnchainTransactionsUseCase:
    """Classify a batch of wallet transactions into ledger entries."""

    def __init__(
        self,
        resolver: TransactionResolverPort,
        known_addresses: Collection[str],
        *,
        wallet: str = COLD_STORAGE_WALLET,
        asset: Asset = BTC,
        track_internal_outputs: bool = True,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            resolver: Port returning raw transactions by id.
            known_addresses: Addresses controlled by the local wallet.
            wallet: Wallet name given to the emitted entries.
            asset: Asset moved by the transactions.
            track_internal_outputs: Emit per-output pairs for internal
                movements.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._resolver = resolver
        self._logger = logger or get_app_logger()
        self._classifier = OnchainClassifier(
            resolver,
            known_addresses,
            wallet=wallet,
            asset=asset,
            track_internal_outputs=track_internal_outputs,
            logger=self._logger,
        )

    def execute(self, txids: Iterable[str]) -> OnchainImportResult:
        """Classify the given transactions.

        Args:
            txids: Ids of the wallet transactions to import.

        Returns:
            OnchainImportResult: Classifications and missing transactions.
        """
        classifications: list[OnchainClassification] = []
        missing: list[str] = []
        for txid in txids:
            transaction = self._resolver.get_transaction(txid)
            if transaction is None:
                self._logger.warning(f"Transaction {txid} not found")
                missing.append(txid)
                continue
            classifications.append(self._classifier.classify(transaction))

        result = OnchainImportResult(
            classifications=classifications,
            missing_txids=missing,
        )
        self._logger.info(
            f"Classified {len(classifications)} transactions into "
            f"{len(result.entries)} entries, {len(result.review_txids)} "
            f"need review, {result.skipped.inputs} inputs and "
            f"{result.skipped.outputs} outputs skipped"
        )
        return result


__all__ = [
    "OnchainClassifier",
    "OnchainImportResult",
    "ImportOnchainTransactionsUseCase",
]

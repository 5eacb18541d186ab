"""Classification of on-chain transactions into ledger entries."""

from collections.abc import Collection
from datetime import datetime, timezone
from decimal import Decimal
from logging import Logger

from lotledger.domain.constants import BTC, COLD_STORAGE_WALLET
from lotledger.domain.models import (
    Asset,
    LedgerEntry,
    LedgerEntryType,
    OnchainClassification,
    RawTransaction,
    ResolvedInput,
    TransactionKind,
    TxOutput,
)
from lotledger.utils.decimal_utils import sum_decimals


def classify_transaction(
    transaction: RawTransaction,
    resolved_inputs: list[ResolvedInput],
    known_addresses: Collection[str],
    *,
    logger: Logger,
    wallet: str = COLD_STORAGE_WALLET,
    asset: Asset = BTC,
    track_internal_outputs: bool = True,
    skipped_inputs: int = 0,
) -> OnchainClassification:
    """Turn a transaction into ledger entries for the local wallet.

    The direction is inferred from which inputs and outputs pay to known
    addresses:

    * every input and output known: internal movement, only the fee leaves
      the wallet (plus one withdrawal/deposit pair per output when
      ``track_internal_outputs`` is set);
    * every input known: withdrawal of the unknown outputs, plus the fee;
    * no input known: one deposit per known output;
    * anything else is ambiguous and yields a zero transfer to review.

    Args:
        transaction: Raw transaction to classify.
        resolved_inputs: Inputs resolved to the output they spend.
        known_addresses: Addresses controlled by the local wallet.
        logger: Logger used for diagnostics.
        wallet: Wallet name given to the emitted entries.
        asset: Asset moved by the transaction.
        track_internal_outputs: Emit per-output pairs for internal movements.
        skipped_inputs: Number of inputs that could not be resolved.

    Returns:
        OnchainClassification: Kind, entries and fee of the transaction.
    """
    outputs: list[TxOutput] = []
    skipped_outputs = 0
    for output in transaction.vout:
        if not output.address:
            logger.warning(f"{transaction.txid}:{output.n} has no address")
            skipped_outputs += 1
            continue
        outputs.append(output)

    total_in = sum_decimals(vin.value for vin in resolved_inputs)
    total_out = sum_decimals(vout.value for vout in outputs)
    fee = total_in - total_out

    known_inputs = [vin for vin in resolved_inputs if vin.address in known_addresses]
    known_outputs = [vout for vout in outputs if vout.address in known_addresses]
    unknown_outputs = [
        vout for vout in outputs if vout.address not in known_addresses
    ]

    all_inputs_known = bool(transaction.vin) and len(known_inputs) == len(
        transaction.vin
    )
    items: list[tuple[LedgerEntryType, Decimal]]
    if all_inputs_known and len(known_outputs) == len(outputs):
        kind = TransactionKind.INTERNAL
        items = []
        if track_internal_outputs:
            for vout in outputs:
                items.append((LedgerEntryType.WITHDRAWAL, -vout.value))
                items.append((LedgerEntryType.DEPOSIT, vout.value))
        items.append((LedgerEntryType.FEE, -fee))
    elif all_inputs_known:
        kind = TransactionKind.WITHDRAWAL
        items = [
            (
                LedgerEntryType.WITHDRAWAL,
                -sum_decimals(vout.value for vout in unknown_outputs),
            ),
            (LedgerEntryType.FEE, -fee),
        ]
    elif not known_inputs:
        # Split by output, matching deposits against withdrawals is easier
        kind = TransactionKind.DEPOSIT
        items = [(LedgerEntryType.DEPOSIT, vout.value) for vout in known_outputs]
    else:
        kind = TransactionKind.AMBIGUOUS
        items = [(LedgerEntryType.TRANSFER, Decimal("0"))]
        logger.warning(
            f"Transaction {transaction.txid} mixes known and unknown "
            "addresses, manual review needed"
        )

    date = datetime.fromtimestamp(transaction.time or 0, tz=timezone.utc)
    entries = [
        LedgerEntry(
            wallet=wallet,
            id=(
                f"{transaction.txid}-{index}"
                if len(items) > 1
                else transaction.txid
            ),
            group_id=transaction.txid,
            date=date,
            type=entry_type,
            amount=amount,
            asset=asset,
        )
        for index, (entry_type, amount) in enumerate(items)
    ]

    return OnchainClassification(
        txid=transaction.txid,
        kind=kind,
        entries=entries,
        fee=fee,
        skipped_inputs=skipped_inputs,
        skipped_outputs=skipped_outputs,
    )


__all__ = ["classify_transaction"]

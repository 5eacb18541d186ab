"""Readers for verbose transaction payloads saved from an Electrum server.

Each payload is the JSON answer of ``blockchain.transaction.get`` with
``verbose=true``, stored as ``<txid>.json`` in a directory.
"""

import json
from decimal import Decimal
from pathlib import Path
from typing import Any

from lotledger.application.ports.transactions import TransactionResolverPort
from lotledger.domain.models import RawTransaction, TxInput, TxOutput
from lotledger.infrastructure.logging.logger import get_app_logger
from lotledger.utils.decimal_utils import coerce_decimal


def parse_transaction(payload: dict[str, Any]) -> RawTransaction:
    """Build a raw transaction from a verbose Electrum payload.

    Coinbase inputs have no previous output and are kept with an empty
    reference. Outputs without a standard address keep ``address=None``.

    Args:
        payload: Decoded JSON payload.

    Returns:
        RawTransaction: Parsed transaction.

    Raises:
        ValueError: If the payload has no txid.
    """
    txid = payload.get("txid")
    if not txid:
        raise ValueError("Transaction payload without txid")

    vin = [
        TxInput(txid=item.get("txid"), vout=item.get("vout"))
        for item in payload.get("vin", [])
    ]
    vout = [
        TxOutput(
            n=int(item["n"]),
            value=coerce_decimal(item.get("value")),
            address=_output_address(item.get("scriptPubKey") or {}),
        )
        for item in payload.get("vout", [])
    ]
    time = payload.get("time") or payload.get("blocktime")
    return RawTransaction(
        txid=str(txid),
        time=int(time) if time is not None else None,
        vin=vin,
        vout=vout,
    )


def _output_address(script: dict[str, Any]) -> str | None:
    address = script.get("address")
    if address:
        return address
    # Older servers list addresses, only single-address scripts are usable
    addresses = script.get("addresses") or []
    if len(addresses) == 1:
        return addresses[0]
    return None


def load_known_addresses(path: Path | str) -> frozenset[str]:
    """Read the addresses controlled by the local wallet.

    The file holds one address per line; blank lines and lines starting
    with ``#`` are ignored.

    Args:
        path: Path to the addresses file.

    Returns:
        frozenset[str]: Known addresses.
    """
    lines = Path(path).read_text(encoding="utf-8").splitlines()
    return frozenset(
        line.strip()
        for line in lines
        if line.strip() and not line.strip().startswith("#")
    )


class JsonFileTransactionResolver(TransactionResolverPort):
    """Transaction resolver backed by a directory of saved payloads."""

    def __init__(self, directory: Path | str, logger=None) -> None:
        """Initialize the resolver.

        Args:
            directory: Directory holding ``<txid>.json`` payloads.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._directory = Path(directory)
        self._logger = logger or get_app_logger()
        self._cache: dict[str, RawTransaction] = {}

    def get_transaction(self, txid: str) -> RawTransaction | None:
        """Return the saved transaction, or None when no payload exists.

        Args:
            txid: Transaction id.

        Returns:
            RawTransaction | None: Parsed transaction if saved.
        """
        if txid in self._cache:
            return self._cache[txid]
        path = self._directory / f"{txid}.json"
        if not path.exists():
            return None
        transaction = self._read(path)
        self._cache[txid] = transaction
        return transaction

    def list_txids(self) -> list[str]:
        """Return the ids of every saved payload."""
        return sorted(path.stem for path in self._directory.glob("*.json"))

    def related_txids(self, known_addresses) -> list[str]:
        """Return the saved transactions touching a known address.

        A transaction is related when one of its outputs pays a known
        address, or when it spends such an output.

        Args:
            known_addresses: Addresses controlled by the local wallet.

        Returns:
            list[str]: Related transaction ids, sorted.
        """
        transactions = [
            transaction
            for transaction in map(self.get_transaction, self.list_txids())
            if transaction is not None
        ]
        funding = {
            (transaction.txid, vout.n)
            for transaction in transactions
            for vout in transaction.vout
            if vout.address in known_addresses
        }
        related = {
            transaction.txid
            for transaction in transactions
            if any(
                (vin.txid, vin.vout) in funding for vin in transaction.vin
            )
            or any(vout.address in known_addresses for vout in transaction.vout)
        }
        return sorted(related)

    def _read(self, path: Path) -> RawTransaction:
        with path.open(encoding="utf-8") as handle:
            payload = json.load(handle, parse_float=Decimal)
        # Some dumps wrap the verbose transaction in a JSON-RPC envelope
        if "result" in payload and isinstance(payload["result"], dict):
            payload = payload["result"]
        transaction = parse_transaction(payload)
        if transaction.txid != path.stem:
            self._logger.warning(
                f"Payload {path.name} holds transaction {transaction.txid}"
            )
        return transaction


__all__ = [
    "parse_transaction",
    "load_known_addresses",
    "JsonFileTransactionResolver",
]

"""Port for looking up raw on-chain transactions."""

from typing import Protocol

from lotledger.domain.models import RawTransaction


class TransactionResolverPort(Protocol):
    """Port exposing raw transactions by id."""

    def get_transaction(self, txid: str) -> RawTransaction | None:
        """Return the transaction, or None when it is unknown."""


__all__ = ["TransactionResolverPort"]

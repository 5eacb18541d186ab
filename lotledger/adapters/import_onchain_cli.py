"""CLI adapter importing saved on-chain transactions into the ledger.

This module classifies the saved Electrum payloads that touch the known
addresses and upserts the resulting entries into the ledger database.
"""

from lotledger.application.use_cases.sync_ledger import SyncLedgerUseCase
from lotledger.infrastructure.container import (
    build_import_onchain_use_case,
    build_known_addresses,
    build_ledger_repository,
)
from lotledger.infrastructure.logging.logger import get_app_logger
from lotledger.infrastructure.settings import LedgerSettings


def main() -> None:
    """Run the on-chain import and store the entries."""
    logger = get_app_logger()
    settings = LedgerSettings.from_env()
    try:
        resolver, use_case = build_import_onchain_use_case(settings)
    except RuntimeError as exc:
        logger.error(str(exc))
        return

    txids = resolver.related_txids(build_known_addresses(settings))
    result = use_case.execute(txids)

    sync = SyncLedgerUseCase(repository=build_ledger_repository(), logger=logger)
    synced = sync.run(result.entries)

    print(
        f"Imported {len(result.classifications)} transactions, "
        f"stored {synced.upserted_count} entries."
    )
    print(
        f"Skipped inputs: {result.skipped.inputs}, "
        f"skipped outputs: {result.skipped.outputs}, "
        f"ambiguous transactions: {len(result.review_txids)}"
    )
    if result.missing_txids:
        print(f"Missing transactions: {', '.join(result.missing_txids)}")
    if result.review_txids:
        print(f"Needs review: {', '.join(result.review_txids)}")


if __name__ == "__main__":  # pragma: no cover
    main()

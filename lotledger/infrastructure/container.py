"""Composition root for wiring infrastructure adapters."""

from lotledger.application.ports.database import DatabaseEnginePort
from lotledger.application.ports.ledger_repository import LedgerRepositoryPort
from lotledger.application.ports.ledger_source import LedgerSourcePort
from lotledger.application.use_cases.build_portfolio import BuildPortfolioUseCase
from lotledger.application.use_cases.collect_ledger import CollectLedgerUseCase
from lotledger.application.use_cases.import_onchain import (
    ImportOnchainTransactionsUseCase,
)
from lotledger.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from lotledger.infrastructure.electrum_payloads import (
    JsonFileTransactionResolver,
    load_known_addresses,
)
from lotledger.infrastructure.ledger_repository import SqlAlchemyLedgerRepository
from lotledger.infrastructure.ledger_sources import (
    OnchainLedgerSource,
    RepositoryLedgerSource,
)
from lotledger.infrastructure.logging.logger import get_app_logger
from lotledger.infrastructure.settings import LedgerSettings


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_ledger_repository(
    db_port: DatabaseEnginePort | None = None,
) -> LedgerRepositoryPort:
    """Return the ledger repository."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyLedgerRepository(resolved_db)


def build_known_addresses(
    settings: LedgerSettings | None = None,
) -> frozenset[str]:
    """Return the addresses of the local wallet, empty when not configured."""
    resolved = settings or LedgerSettings.from_env()
    if resolved.known_addresses_file is None:
        get_app_logger().warning(
            "LEDGER_KNOWN_ADDRESSES_FILE is not set, no address is known"
        )
        return frozenset()
    return load_known_addresses(resolved.known_addresses_file)


def build_import_onchain_use_case(
    settings: LedgerSettings | None = None,
) -> tuple[JsonFileTransactionResolver, ImportOnchainTransactionsUseCase]:
    """Return the payload resolver and the on-chain import use case.

    Raises:
        RuntimeError: If no transactions directory is configured.
    """
    resolved = settings or LedgerSettings.from_env()
    if resolved.transactions_dir is None:
        raise RuntimeError(
            "On-chain import requires a LEDGER_TRANSACTIONS_DIR value."
        )
    logger = get_app_logger()
    resolver = JsonFileTransactionResolver(resolved.transactions_dir, logger=logger)
    use_case = ImportOnchainTransactionsUseCase(
        resolver,
        build_known_addresses(resolved),
        wallet=resolved.cold_storage_wallet,
        asset=resolved.history_asset,
        track_internal_outputs=resolved.track_internal_outputs,
        logger=logger,
    )
    return resolver, use_case


def build_ledger_sources(
    settings: LedgerSettings | None = None,
    db_port: DatabaseEnginePort | None = None,
) -> list[LedgerSourcePort]:
    """Return the stored ledger plus the on-chain payloads when configured."""
    resolved = settings or LedgerSettings.from_env()
    sources: list[LedgerSourcePort] = [
        RepositoryLedgerSource(build_ledger_repository(db_port))
    ]
    if resolved.transactions_dir is not None:
        resolver, use_case = build_import_onchain_use_case(resolved)
        sources.append(
            OnchainLedgerSource(
                resolver,
                use_case,
                build_known_addresses(resolved),
            )
        )
    return sources


def build_collect_ledger_use_case(
    settings: LedgerSettings | None = None,
    db_port: DatabaseEnginePort | None = None,
) -> CollectLedgerUseCase:
    """Return the use case collecting every configured source."""
    resolved = settings or LedgerSettings.from_env()
    return CollectLedgerUseCase(
        build_ledger_sources(resolved, db_port),
        max_workers=resolved.max_workers,
        ignored_ids=resolved.ignored_ids,
        logger=get_app_logger(),
    )


def build_portfolio_use_case(
    settings: LedgerSettings | None = None,
) -> BuildPortfolioUseCase:
    """Return the portfolio builder configured from settings."""
    resolved = settings or LedgerSettings.from_env()
    return BuildPortfolioUseCase(
        base_asset=resolved.base_currency,
        history_asset=resolved.history_asset,
        audit_wallet=resolved.cold_storage_wallet,
        unrated_budget=resolved.unrated_budget,
        strict_transfers=resolved.strict_transfers,
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_ledger_repository",
    "build_known_addresses",
    "build_import_onchain_use_case",
    "build_ledger_sources",
    "build_collect_ledger_use_case",
    "build_portfolio_use_case",
]

"""CLI adapter building the portfolio from every configured source."""

from lotledger.infrastructure.container import (
    build_collect_ledger_use_case,
    build_portfolio_use_case,
)
from lotledger.infrastructure.logging.logger import get_app_logger
from lotledger.infrastructure.settings import LedgerSettings
from lotledger.utils.decimal_utils import format_amount


def main() -> None:
    """Collect the ledger, build the portfolio and print a summary."""
    logger = get_app_logger()
    settings = LedgerSettings.from_env()

    collected = build_collect_ledger_use_case(settings).execute()
    report = build_portfolio_use_case(settings).execute(
        collected.entries,
        skip_counts=collected.skip_counts,
    )

    asset = settings.history_asset.name
    current = report.current
    verification = report.verification
    logger.info(
        f"Built portfolio from {report.entry_count} entries "
        f"({report.event_counts})"
    )
    print(f"Total: {format_amount(current.total)} {asset}")
    print(f"Income: {format_amount(current.bonus)} {asset}")
    print(
        f"Cost basis: {format_amount(current.spent, 2)} "
        f"{settings.base_currency.name}"
    )
    print(
        f"{verification.wallet}: {verification.ref_count} lots, "
        f"{verification.dust_count} below 1 sat, "
        f"{format_amount(verification.unrated)} {asset} without rate, "
        f"{verification.orphan_count} orphans"
    )
    print(
        f"Skipped inputs: {report.skip_counts.inputs}, "
        f"skipped outputs: {report.skip_counts.outputs}, "
        f"entries to review: {len(report.review_entries)}"
    )
    if report.unresolved_transfers:
        print(f"Unresolved transfers: {len(report.unresolved_transfers)}")
    if collected.missing_ignored_ids:
        print(
            f"Ignored ids not found: {', '.join(collected.missing_ignored_ids)}"
        )


if __name__ == "__main__":  # pragma: no cover
    main()

"""Main CLI entry point."""

import logging

import click

from walletcycle.advisory.http_client import DEFAULT_TIMEOUT
from walletcycle.context import AppContext
from walletcycle.database.factories import create_sqlite_database
from walletcycle.domain.errors import DomainError
from walletcycle.domain.transaction import OverLimitPolicy
from walletcycle.logging_config import LOG_LEVELS, configure_logging

from walletcycle.cli.commands import (
    wallet,
    txn,
    planning,
    notifications,
    reset,
    backup,
    advisor,
)

logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides WALLETCYCLE_DB_PATH environment variable)",
    envvar="WALLETCYCLE_DB_PATH",
)
@click.option(
    "--advisor-url",
    help="Base URL of the advisory service (WALLETCYCLE_ADVISOR_URL); unset uses local fallbacks",
    envvar="WALLETCYCLE_ADVISOR_URL",
)
@click.option(
    "--advisor-timeout",
    type=float,
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="Advisory request timeout in seconds",
    envvar="WALLETCYCLE_ADVISOR_TIMEOUT",
)
@click.option(
    "--over-limit",
    type=click.Choice([p.value for p in OverLimitPolicy]),
    default=OverLimitPolicy.ALLOW.value,
    show_default=True,
    help="What to do when an outgoing amount exceeds the remaining limit",
    envvar="WALLETCYCLE_OVER_LIMIT",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level",
    envvar="WALLETCYCLE_LOG_LEVEL",
)
@click.pass_context
def cli(
    ctx,
    db_path: str | None,
    advisor_url: str | None,
    advisor_timeout: float,
    over_limit: str,
    log_level: str,
):
    """walletcycle - Mobile wallet limit planner.

    Track mobile-money wallets and their monthly transfer limits, and get a
    send/receive rotation that keeps every wallet's limit in use.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize the store only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)

        app = AppContext.create(
            db,
            advisor_url=advisor_url,
            advisor_timeout=advisor_timeout,
            over_limit_policy=OverLimitPolicy(over_limit),
        )
        ctx.obj["app"] = app

        # Explicit "reset" runs do their own check
        if ctx.invoked_subcommand != "reset":
            try:
                updated = app.monthly_reset.run_if_due()
            except DomainError as e:
                logger.error("Monthly limit reset failed: %s", e)
                click.echo(f"Warning: monthly limit reset failed: {e}", err=True)
            else:
                if updated is not None:
                    click.echo(f"Monthly limits reset for {updated} wallet(s).", err=True)


# Register all commands
wallet.register_commands(cli)
txn.register_commands(cli)
planning.register_commands(cli)
notifications.register_commands(cli)
reset.register_commands(cli)
backup.register_commands(cli)
advisor.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()

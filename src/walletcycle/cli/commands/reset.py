"""Monthly limit reset command."""

import click
from walletcycle.domain.errors import DomainError

from walletcycle.cli.error_handling import handle_domain_error


@click.command("reset")
@click.option("--force", is_flag=True, help="Reset now even if it is not the first of the month")
@click.pass_context
def reset(ctx, force: bool):
    """Restore every wallet's full monthly limit.

    Without --force this only acts on the first day of the month, once per
    month, which is also what every other command checks on startup.
    """
    app = ctx.obj["app"]

    try:
        if force:
            updated = app.monthly_reset.force_reset()
        else:
            updated = app.monthly_reset.run_if_due()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if updated is None:
        last = app.monthly_reset.last_reset_date()
        click.echo(
            "Monthly reset is not due"
            + (f" (last reset on {last.isoformat()})." if last else ".")
        )
        return
    click.echo(f"Reset the monthly limit of {updated} wallet(s).")


def register_commands(cli):
    """Register reset command with main CLI."""
    cli.add_command(reset)

"""Backup export and import commands."""

import click
from walletcycle.domain.errors import DomainError

from walletcycle.cli.error_handling import handle_domain_error


@click.group()
def backup_group():
    """Export or restore all data as JSON."""
    pass


@backup_group.command("export")
@click.argument("file_path", metavar="FILE", type=click.Path(dir_okay=False, writable=True))
@click.pass_context
def export_backup(ctx, file_path: str):
    """Write wallets, transactions, notifications and settings to FILE."""
    app = ctx.obj["app"]

    try:
        document = app.backup.export_to_file(file_path)
    except (DomainError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo(
        f"Exported {len(document['wallets'])} wallet(s) and "
        f"{len(document['transactions'])} transaction(s) to {file_path}"
    )


@backup_group.command("import")
@click.argument("file_path", metavar="FILE", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def import_backup(ctx, file_path: str, yes: bool):
    """Replace stored data with the contents of FILE.

    Each collection present in the file replaces the stored one; collections
    missing from the file are kept.
    """
    app = ctx.obj["app"]

    if not yes and not click.confirm("This replaces your stored data. Continue?"):
        click.echo("Import cancelled.")
        return

    try:
        summary = app.backup.import_from_file(file_path)
    except DomainError as e:
        handle_domain_error(ctx, e)

    counts = ", ".join(f"{count} {name}" for name, count in summary.as_dict().items())
    click.echo(f"Imported {counts or 'nothing'} from {file_path}")


def register_commands(cli):
    """Register backup commands with main CLI."""
    cli.add_command(backup_group, name="backup")

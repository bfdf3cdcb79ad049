"""Wallet management commands."""

from decimal import Decimal

import click
from walletcycle.domain.classification import classify_wallet
from walletcycle.domain.entities import DEFAULT_MONTHLY_LIMIT, WALLET_TYPES
from walletcycle.domain.errors import DomainError
from walletcycle.domain.wallet import SORT_OPTIONS
from walletcycle.utils.amount_parser import parse_amount

from walletcycle.cli.error_handling import handle_domain_error
from walletcycle.cli.formatting import format_money, format_percentage, wallet_label
from walletcycle.cli.wallet_resolution import resolve_wallet_or_exit


@click.group()
def wallet_group():
    """Manage wallets."""
    pass


@wallet_group.command("create")
@click.argument("name", metavar="NAME")
@click.argument("phone_number", metavar="PHONE")
@click.option("--balance", default="0", help="Opening balance (e.g. 1500 or '1,500 EGP')")
@click.option("--limit", "monthly_limit", default=str(DEFAULT_MONTHLY_LIMIT), show_default=True, help="Monthly transfer limit")
@click.option("--type", "wallet_type", type=click.Choice(list(WALLET_TYPES)), default="vodafone-cash", show_default=True, help="Wallet provider")
@click.option("--sim", "sim_slot", type=click.IntRange(1, 2), default=1, show_default=True, help="SIM slot holding the line")
@click.option("--pin", "pin_code", help="Wallet PIN (stored as given)")
@click.pass_context
def create_wallet(
    ctx,
    name: str,
    phone_number: str,
    balance: str,
    monthly_limit: str,
    wallet_type: str,
    sim_slot: int,
    pin_code: str | None,
):
    """Create a new wallet with its full monthly limit available.

    Examples:
        walletcycle wallet create "Samsung" 01012345678
        walletcycle wallet create "Old phone" 01298765432 --balance 2500 --type etisalat-cash --sim 2
    """
    app = ctx.obj["app"]

    try:
        wallet = app.wallets.create_wallet(
            name=name,
            phone_number=phone_number,
            balance=parse_amount(balance),
            monthly_limit=parse_amount(monthly_limit),
            wallet_type=wallet_type,
            sim_slot=sim_slot,
            pin_code=pin_code,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created wallet '{wallet.name}' (ID: {wallet.id})")


@wallet_group.command("list")
@click.option("--sort", "sort_by", type=click.Choice(SORT_OPTIONS), default="date", show_default=True, help="Sort order")
@click.option("--type", "wallet_type", type=click.Choice(list(WALLET_TYPES)), help="Only wallets of this provider")
@click.pass_context
def list_wallets(ctx, sort_by: str, wallet_type: str | None):
    """List wallets with balance and remaining limit."""
    app = ctx.obj["app"]

    wallets = app.wallets.list_wallets(sort_by=sort_by, wallet_type=wallet_type)
    if not wallets:
        click.echo("No wallets found.")
        return

    click.echo("\nWallets:")
    click.echo("-" * 100)
    click.echo(f"{'ID':<10} {'Name':<20} {'Phone':<13} {'Balance':>18} {'Remaining limit':>20} {'Left':>6}")
    click.echo("-" * 100)
    for w in wallets:
        click.echo(
            f"{w.id[:8]:<10} {w.name[:20]:<20} {w.phone_number:<13} "
            f"{format_money(w.balance):>18} {format_money(w.remaining_limit):>20} "
            f"{format_percentage(w.remaining_percentage):>6}"
        )
    click.echo("-" * 100)
    total = sum((w.balance for w in wallets), Decimal(0))
    click.echo(f"Total balance: {format_money(total)} | Wallets: {len(wallets)}")


@wallet_group.command("show")
@click.argument("wallet", metavar="WALLET")
@click.pass_context
def show_wallet(ctx, wallet: str):
    """Show one wallet in detail.

    WALLET can be a wallet name, phone number, ID or ID prefix.
    """
    app = ctx.obj["app"]
    wallet_id = resolve_wallet_or_exit(ctx, app.wallets, wallet)
    w = app.wallets.require_wallet(wallet_id)
    result = classify_wallet(w)

    click.echo(f"\nWallet: {wallet_label(w)}")
    click.echo(f"  ID: {w.id}")
    click.echo(f"  SIM slot: {w.sim_slot}")
    if w.pin_code:
        click.echo(f"  PIN: {w.pin_code}")
    click.echo(f"  Balance: {format_money(w.balance)}")
    click.echo(f"  Monthly limit: {format_money(w.monthly_limit)}")
    click.echo(
        f"  Remaining limit: {format_money(w.remaining_limit)} "
        f"({format_percentage(w.remaining_percentage)})"
    )
    click.echo(f"  Last updated: {w.last_updated.astimezone():%Y-%m-%d %H:%M}")
    click.echo(f"  Classification: {result.classification.label} - {result.reason}")


@wallet_group.command("edit")
@click.argument("wallet", metavar="WALLET")
@click.option("--name", help="New display name")
@click.option("--phone", "phone_number", help="New phone number")
@click.option("--sim", "sim_slot", type=click.IntRange(1, 2), help="New SIM slot")
@click.option("--pin", "pin_code", help="New PIN (empty string clears it)")
@click.option("--type", "wallet_type", type=click.Choice(list(WALLET_TYPES)), help="New provider")
@click.pass_context
def edit_wallet(
    ctx,
    wallet: str,
    name: str | None,
    phone_number: str | None,
    sim_slot: int | None,
    pin_code: str | None,
    wallet_type: str | None,
):
    """Edit descriptive wallet fields.

    Use set-balance and set-limit to change amounts.

    Examples:
        walletcycle wallet edit Samsung --name "Samsung A54" --sim 2
    """
    app = ctx.obj["app"]
    wallet_id = resolve_wallet_or_exit(ctx, app.wallets, wallet)

    try:
        updated = app.wallets.update_wallet_details(
            wallet_id,
            name=name,
            phone_number=phone_number,
            sim_slot=sim_slot,
            pin_code=pin_code,
            wallet_type=wallet_type,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated wallet '{updated.name}'")


@wallet_group.command("set-limit")
@click.argument("wallet", metavar="WALLET")
@click.argument("amount", metavar="AMOUNT")
@click.pass_context
def set_limit(ctx, wallet: str, amount: str):
    """Change a wallet's monthly limit.

    The share of the limit already used is kept: a wallet at 50% of a
    200,000 limit has 50,000 left after moving to a 100,000 limit.
    """
    app = ctx.obj["app"]
    wallet_id = resolve_wallet_or_exit(ctx, app.wallets, wallet)

    try:
        updated = app.wallets.edit_wallet_limits(wallet_id, parse_amount(amount))
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Monthly limit of '{updated.name}' is now {format_money(updated.monthly_limit)} "
        f"({format_money(updated.remaining_limit)} remaining)"
    )


@wallet_group.command("set-balance")
@click.argument("wallet", metavar="WALLET")
@click.argument("amount", metavar="AMOUNT")
@click.pass_context
def set_balance(ctx, wallet: str, amount: str):
    """Correct a wallet's balance to what the phone shows.

    A lower balance also reduces the remaining limit by the difference
    (never below zero).
    """
    app = ctx.obj["app"]
    wallet_id = resolve_wallet_or_exit(ctx, app.wallets, wallet)

    try:
        updated = app.wallets.correct_balance(wallet_id, parse_amount(amount))
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Balance of '{updated.name}' is now {format_money(updated.balance)} "
        f"({format_money(updated.remaining_limit)} limit remaining)"
    )


@wallet_group.command("delete")
@click.argument("wallet", metavar="WALLET")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_wallet(ctx, wallet: str, yes: bool):
    """Delete a wallet and all of its transactions.

    Examples:
        walletcycle wallet delete Samsung
        walletcycle wallet delete 01012345678 --yes
    """
    app = ctx.obj["app"]
    wallet_id = resolve_wallet_or_exit(ctx, app.wallets, wallet)
    w = app.wallets.require_wallet(wallet_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete wallet '{w.name}' and all of its transactions?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        removed = app.wallets.delete_wallet(wallet_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted wallet '{w.name}' and {removed} transaction(s)")


@wallet_group.command("classify")
@click.pass_context
def classify_wallets(ctx):
    """Show the usage category of every wallet."""
    app = ctx.obj["app"]

    wallets = app.wallets.list_wallets()
    if not wallets:
        click.echo("No wallets found.")
        return

    for w in wallets:
        result = classify_wallet(w)
        click.echo(f"{w.name:<20} {result.classification.label:<20} {result.reason}")


def register_commands(cli):
    """Register wallet commands with main CLI."""
    cli.add_command(wallet_group, name="wallet")

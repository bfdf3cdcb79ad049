"""Transaction management commands."""

import click
from walletcycle.domain.entities import TransactionType
from walletcycle.domain.errors import DomainError
from walletcycle.utils.amount_parser import parse_amount
from walletcycle.utils.date_parser import PERIODS, parse_date

from walletcycle.cli.date_filters import resolve_cli_date_range
from walletcycle.cli.error_handling import handle_domain_error
from walletcycle.cli.formatting import format_money
from walletcycle.cli.wallet_resolution import resolve_wallet_or_exit

TYPE_CHOICES = [t.value for t in TransactionType]


@click.group()
def txn_group():
    """Record and manage transactions."""
    pass


@txn_group.command("add")
@click.argument("wallet", metavar="WALLET")
@click.argument("txn_type", metavar="TYPE", type=click.Choice(TYPE_CHOICES))
@click.argument("amount", metavar="AMOUNT")
@click.argument("description", metavar="DESCRIPTION")
@click.option("--date", "txn_date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--reference", help="Provider reference number")
@click.pass_context
def add_transaction(
    ctx,
    wallet: str,
    txn_type: str,
    amount: str,
    description: str,
    txn_date: str | None,
    reference: str | None,
):
    """Record a deposit, withdrawal or transfer on a wallet.

    Withdrawals and transfers also use up the wallet's monthly limit.

    Examples:
        walletcycle txn add Samsung deposit 5000 "Salary"
        walletcycle txn add 01012345678 transfer "1,250 EGP" "Rent" --date yesterday
    """
    app = ctx.obj["app"]
    wallet_id = resolve_wallet_or_exit(ctx, app.wallets, wallet)

    try:
        parsed_date = parse_date(txn_date) if txn_date else None
        txn = app.transactions.post_transaction(
            wallet_id=wallet_id,
            type=txn_type,
            amount=parse_amount(amount),
            description=description,
            date=parsed_date,
            reference=reference,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    w = app.wallets.require_wallet(wallet_id)
    click.echo(f"Recorded {txn.type.value} of {format_money(txn.amount)} (ID: {txn.id})")
    click.echo(
        f"'{w.name}': balance {format_money(w.balance)}, "
        f"remaining limit {format_money(w.remaining_limit)}"
    )
    if w.remaining_limit < 0:
        click.echo(f"Warning: '{w.name}' is over its monthly limit.", err=True)


@txn_group.command("list")
@click.option("--wallet", help="Wallet name, phone number or ID")
@click.option("--type", "txn_type", type=click.Choice(TYPE_CHOICES), help="Only this transaction type")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--period", type=click.Choice(PERIODS), help="Named period instead of explicit dates")
@click.option("--min-amount", help="Smallest amount to include")
@click.option("--max-amount", help="Largest amount to include")
@click.pass_context
def list_transactions(
    ctx,
    wallet: str | None,
    txn_type: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    min_amount: str | None,
    max_amount: str | None,
):
    """List transactions, newest first, with optional filters."""
    app = ctx.obj["app"]

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    wallet_id = resolve_wallet_or_exit(ctx, app.wallets, wallet) if wallet else None

    try:
        transactions = app.transactions.list_transactions(
            wallet_id=wallet_id,
            type=txn_type,
            start_date=start,
            end_date=end,
            min_amount=parse_amount(min_amount) if min_amount else None,
            max_amount=parse_amount(max_amount) if max_amount else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    names = {w.id: w.name for w in app.wallets.list_wallets()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(f"{'ID':<10} {'Date':<12} {'Type':<11} {'Amount':>18} {'Wallet':<18} {'Description':<28}")
    click.echo("-" * 100)
    for txn in transactions:
        click.echo(
            f"{txn.id[:8]:<10} {txn.date.astimezone():%Y-%m-%d}   {txn.type.value:<11} "
            f"{format_money(txn.amount):>18} {names.get(txn.wallet_id, 'Unknown')[:18]:<18} "
            f"{txn.description[:28]:<28}"
        )

    incoming = sum(t.amount for t in transactions if not t.type.is_outgoing)
    outgoing = sum(t.amount for t in transactions if t.type.is_outgoing)
    click.echo("-" * 100)
    click.echo(
        f"In: {format_money(incoming)} | Out: {format_money(outgoing)} | Count: {len(transactions)}"
    )


@txn_group.command("edit")
@click.argument("transaction_id", metavar="TRANSACTION_ID")
@click.option("--description", help="New description")
@click.option("--reference", help="New reference (empty string clears it)")
@click.pass_context
def edit_transaction(
    ctx,
    transaction_id: str,
    description: str | None,
    reference: str | None,
):
    """Edit a transaction's description or reference.

    The amount, type and date cannot change; the wallet is not affected.
    """
    app = ctx.obj["app"]

    try:
        app.transactions.update_transaction(
            transaction_id,
            description=description,
            reference=reference,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated transaction {transaction_id}")


@txn_group.command("delete")
@click.argument("transaction_id", metavar="TRANSACTION_ID")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool):
    """Delete a transaction record.

    The wallet balance and remaining limit are NOT restored. Use
    'wallet set-balance' to correct the wallet if needed.
    """
    app = ctx.obj["app"]

    txn = app.transactions.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Delete {txn.type.value} of {format_money(txn.amount)} ({txn.description})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        app.transactions.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted transaction {transaction_id} (wallet totals unchanged)")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(txn_group, name="txn")

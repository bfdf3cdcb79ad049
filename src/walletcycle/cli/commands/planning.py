"""Planning and analysis commands."""

import click
from walletcycle.domain.patterns import analyze_transaction_patterns, predict_limit_exhaustion
from walletcycle.domain.portfolio import analyze_wallets
from walletcycle.domain.strategy import generate_cycle_strategy

from walletcycle.cli.formatting import format_money, format_percentage, wallet_label
from walletcycle.cli.wallet_resolution import resolve_wallet_or_exit


@click.command("strategy")
@click.pass_context
def strategy(ctx):
    """Recommend which wallet to receive on and which to send from."""
    app = ctx.obj["app"]
    plan = generate_cycle_strategy(app.wallets.list_wallets(sort_by="created"))

    click.echo("\nCycle strategy:")
    click.echo("-" * 60)
    if plan.receive_wallet is not None:
        click.echo(
            f"Receive on: {wallet_label(plan.receive_wallet)} - "
            f"{format_money(plan.receive_wallet.remaining_limit)} limit left"
        )
    if plan.send_wallet is not None:
        click.echo(
            f"Send from:  {wallet_label(plan.send_wallet)} - "
            f"{format_money(plan.send_wallet.remaining_limit)} limit left "
            f"({plan.send_remaining_percentage}%)"
        )
    if plan.days_until_limit_reached is not None:
        click.echo(f"Days until the send wallet's limit runs out: ~{plan.days_until_limit_reached}")
    if plan.cycle_stage is not None:
        click.echo(
            f"Cycle stage: {plan.cycle_stage.value} ({plan.cycle_completion_percentage}% complete)"
        )
    click.echo("-" * 60)
    click.echo(plan.recommendation)

    if plan.is_optimal_switch_point:
        click.echo("Now is a good time to swap the send and receive wallets.")
    elif plan.should_change_wallets:
        click.echo("Consider swapping the send and receive wallets soon.")
    if plan.is_warning_point:
        click.echo("Warning: the send wallet is running low before the receive wallet has filled up.")


@click.command("analyze")
@click.pass_context
def analyze(ctx):
    """Summarize all wallets and the transaction history."""
    app = ctx.obj["app"]
    wallets = app.wallets.list_wallets(sort_by="created")
    names = {w.id: w.name for w in wallets}
    analysis = analyze_wallets(wallets)

    click.echo("\nPortfolio:")
    click.echo("-" * 60)
    click.echo(f"Total balance:         {format_money(analysis.total_balance)}")
    click.echo(f"Total monthly limit:   {format_money(analysis.total_limit)}")
    click.echo(f"Total remaining limit: {format_money(analysis.total_remaining_limit)}")
    if analysis.most_used_wallet is not None:
        click.echo(f"Most used wallet:      {names[analysis.most_used_wallet]}")
        click.echo(f"Least used wallet:     {names[analysis.least_used_wallet]}")

    if analysis.classified_wallets:
        click.echo("\nWallets:")
        for result in analysis.classified_wallets:
            click.echo(
                f"  {result.name:<20} {result.classification.label:<20} "
                f"balance share {format_percentage(analysis.wallet_distribution[result.wallet_id])}, "
                f"limit left {format_percentage(analysis.limit_distribution[result.wallet_id])}"
            )

    click.echo("\nRecommendations:")
    for recommendation in analysis.recommendations:
        click.echo(f"  - {recommendation}")

    pattern = analyze_transaction_patterns(app.transactions.list_transactions())
    click.echo("\nTransaction patterns:")
    if not pattern.sufficient_data:
        click.echo("  Not enough transactions yet (at least 5 are needed).")
        return
    click.echo(f"  Most active day:  {pattern.most_active_day}")
    click.echo(f"  Least active day: {pattern.least_active_day}")
    click.echo(f"  Average deposit:    {format_money(pattern.daily_average_deposit)}")
    click.echo(f"  Average withdrawal: {format_money(pattern.daily_average_withdrawal)}")
    click.echo(f"  Biggest deposit:    {format_money(pattern.biggest_deposit)}")
    click.echo(f"  Biggest withdrawal: {format_money(pattern.biggest_withdrawal)}")

    if app.advisory.available:
        insight = app.advisory.analyze_patterns(app.transactions.list_transactions())
        click.echo("\nAdvisor insight:")
        click.echo(f"  Frequent days: {', '.join(insight.frequent_days) or '-'}")
        click.echo(f"  Average transaction: {format_money(insight.average_transaction_size)}")
        click.echo(f"  Large transactions: {insight.large_transactions}")
        if insight.unusual_activity:
            click.echo("  Unusual activity detected.")


@click.command("predict")
@click.argument("wallet", metavar="WALLET")
@click.pass_context
def predict(ctx, wallet: str):
    """Forecast when a wallet's monthly limit runs out.

    WALLET can be a wallet name, phone number, ID or ID prefix.
    """
    app = ctx.obj["app"]
    wallet_id = resolve_wallet_or_exit(ctx, app.wallets, wallet)
    w = app.wallets.require_wallet(wallet_id)
    transactions = app.transactions.list_transactions(wallet_id=wallet_id)

    prediction = predict_limit_exhaustion(w, transactions)
    click.echo(f"\nForecast for {wallet_label(w)}:")
    if prediction.days_until_exhausted is not None:
        click.echo(f"  Days until the limit runs out: {prediction.days_until_exhausted}")
    click.echo(f"  {prediction.recommended_action}")

    if app.advisory.available:
        forecast = app.advisory.predict_limit(w, transactions)
        click.echo("\nAdvisor forecast:")
        click.echo(f"  Days until exhaustion: {forecast.days_until_exhaustion}")
        click.echo(f"  Daily usage: {format_money(forecast.daily_usage)}")
        click.echo(f"  {forecast.recommendation}")


def register_commands(cli):
    """Register planning commands with main CLI."""
    cli.add_command(strategy)
    cli.add_command(analyze)
    cli.add_command(predict)

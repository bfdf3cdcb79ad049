"""Advisor commands."""

import click


@click.command("ask")
@click.argument("question", metavar="QUESTION")
@click.pass_context
def ask(ctx, question: str):
    """Ask the advisor a question about your wallets."""
    app = ctx.obj["app"]
    answer = app.advisory.ask(
        question, app.wallets.list_wallets(), app.transactions.list_transactions()
    )
    click.echo(answer)


@click.command("categorize")
@click.argument("description", metavar="DESCRIPTION")
@click.pass_context
def categorize(ctx, description: str):
    """Guess the category of a transaction description."""
    app = ctx.obj["app"]
    result = app.advisory.classify_transaction(description)
    click.echo(f"Category: {result.category} (confidence {result.confidence:.0%})")


@click.command("recommend")
@click.pass_context
def recommend(ctx):
    """Get advisor recommendations for your wallets."""
    app = ctx.obj["app"]
    recommendations = app.advisory.smart_recommendations(
        app.wallets.list_wallets(), app.transactions.list_transactions()
    )
    if not recommendations:
        click.echo("No recommendations. Add a wallet first.")
        return
    for rec in recommendations:
        click.echo(f"[{rec.priority}] {rec.title}: {rec.description}")


def register_commands(cli):
    """Register advisor commands with main CLI."""
    cli.add_command(ask)
    cli.add_command(categorize)
    cli.add_command(recommend)

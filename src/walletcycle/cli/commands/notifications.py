"""Notification commands."""

import click
from walletcycle.domain.entities import NotificationType
from walletcycle.domain.errors import DomainError

from walletcycle.cli.error_handling import handle_domain_error

_MARKERS = {
    NotificationType.SUCCESS: "+",
    NotificationType.WARNING: "!",
    NotificationType.ERROR: "x",
    NotificationType.INFO: "i",
}


@click.group()
def notifications_group():
    """Read and manage notifications."""
    pass


@notifications_group.command("list")
@click.option("--unread", is_flag=True, help="Show only unread notifications")
@click.pass_context
def list_notifications(ctx, unread: bool):
    """List notifications, newest first."""
    app = ctx.obj["app"]

    notifications = app.notifications.list_notifications(unread_only=unread)
    if not notifications:
        click.echo("No notifications.")
        return

    click.echo(f"\n{app.notifications.unread_count()} unread notification(s):")
    click.echo("-" * 80)
    for n in notifications:
        status = " " if n.is_read else "*"
        click.echo(f"{status} [{_MARKERS[n.type]}] {n.date.astimezone():%Y-%m-%d %H:%M} {n.title} ({n.id[:8]})")
        click.echo(f"      {n.message}")


@notifications_group.command("read")
@click.argument("notification_id", metavar="NOTIFICATION_ID", required=False)
@click.option("--all", "mark_all", is_flag=True, help="Mark every notification as read")
@click.pass_context
def read_notifications(ctx, notification_id: str | None, mark_all: bool):
    """Mark one notification, or all of them, as read."""
    app = ctx.obj["app"]

    if mark_all == (notification_id is not None):
        click.echo("Error: Give either a NOTIFICATION_ID or --all.", err=True)
        ctx.exit(1)

    if mark_all:
        count = app.notifications.mark_all_as_read()
        click.echo(f"Marked {count} notification(s) as read")
        return

    try:
        app.notifications.mark_as_read(notification_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Marked notification {notification_id} as read")


@notifications_group.command("clear")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def clear_notifications(ctx, yes: bool):
    """Delete all notifications."""
    app = ctx.obj["app"]

    if not yes and not click.confirm("Delete all notifications?"):
        click.echo("Cancelled.")
        return

    count = app.notifications.clear_notifications()
    click.echo(f"Deleted {count} notification(s)")


def register_commands(cli):
    """Register notification commands with main CLI."""
    cli.add_command(notifications_group, name="notifications")

"""CLI helper for wallet resolution."""

from __future__ import annotations

import click
from walletcycle.domain.errors import DomainError
from walletcycle.domain.wallet import WalletService
from walletcycle.utils.wallet_resolver import resolve_wallet

from walletcycle.cli.error_handling import handle_domain_error


def resolve_wallet_or_exit(ctx: click.Context, wallet_service: WalletService, wallet: str) -> str:
    """Resolve a wallet reference, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_wallet(wallet_service, wallet)
    except DomainError as exc:
        handle_domain_error(ctx, exc)

"""Output formatting shared by the commands."""

from decimal import Decimal

from walletcycle.domain.entities import WALLET_TYPES, Wallet, round_percentage

CURRENCY = "EGP"


def format_money(amount: Decimal) -> str:
    """Format an amount as "1,234.50 EGP"."""
    return f"{amount:,.2f} {CURRENCY}"


def format_percentage(value: Decimal) -> str:
    return f"{round_percentage(value)}%"


def wallet_label(wallet: Wallet) -> str:
    """Short one-line wallet description: name, provider and phone."""
    provider = WALLET_TYPES.get(wallet.wallet_type, wallet.wallet_type)
    return f"{wallet.name} ({provider}, {wallet.phone_number})"

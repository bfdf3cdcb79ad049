"""Input validation shared by the ledger services.

Every check raises ValidationError before anything is written to the store.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from walletcycle.domain.entities import WALLET_TYPES
from walletcycle.domain.errors import ValidationError

PHONE_NUMBER_LENGTH = 11


def to_amount(value, field_name: str, positive: bool = False, max_decimal_places: int = 2) -> Decimal:
    """Convert a money value to Decimal and check its sign.

    Args:
        value: Decimal, int or numeric string
        field_name: Name used in error messages
        positive: If True, zero is rejected too
        max_decimal_places: Maximum digits after the decimal point

    Returns:
        Decimal amount

    Raises:
        ValidationError: If the value is missing, not a number or negative
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field_name} must be a number, got {value!r}")

    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a finite number")
    if positive and amount <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    if -amount.as_tuple().exponent > max_decimal_places:
        raise ValidationError(f"{field_name} allows at most {max_decimal_places} decimal places")
    return amount


def require_text(value: Optional[str], field_name: str) -> str:
    """Return the stripped value, rejecting missing or blank text."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def validate_phone_number(phone_number: Optional[str]) -> str:
    """Check a wallet phone number: exactly 11 digits."""
    phone_number = require_text(phone_number, "Phone number")
    if not re.fullmatch(rf"\d{{{PHONE_NUMBER_LENGTH}}}", phone_number):
        raise ValidationError(
            f"Phone number must be {PHONE_NUMBER_LENGTH} digits, got '{phone_number}'"
        )
    return phone_number


def validate_sim_slot(sim_slot) -> int:
    """Check a SIM slot number (1 or 2)."""
    try:
        slot = int(sim_slot)
    except (TypeError, ValueError):
        raise ValidationError(f"SIM slot must be 1 or 2, got {sim_slot!r}")
    if slot not in (1, 2):
        raise ValidationError(f"SIM slot must be 1 or 2, got {slot}")
    return slot


def validate_wallet_type(wallet_type: Optional[str]) -> str:
    """Check the wallet provider kind against the known types."""
    wallet_type = require_text(wallet_type, "Wallet type")
    if wallet_type not in WALLET_TYPES:
        raise ValidationError(
            f"Unknown wallet type '{wallet_type}'. Use one of: {', '.join(WALLET_TYPES)}"
        )
    return wallet_type

"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from walletcycle.domain.errors import ValidationError

# Arabic-Indic and Eastern Arabic-Indic (Persian) digits
_DIGITS = str.maketrans("٠١٢٣٤٥٦٧٨٩۰۱۲۳۴۵۶۷۸۹", "01234567890123456789")
_CURRENCY = re.compile(r"(EGP|LE|L\.E\.?|ج\.?\s?م\.?|جنيه(?:ا|ات)?)", re.IGNORECASE)


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "1500" or "1500.50"
    - "1,500" and "١٥٠٠" (Arabic-Indic digits)
    - "١٬٥٠٠٫٥٠" (Arabic thousands and decimal separators)
    - "EGP 1500", "1500 ج.م", "1500 جنيه"
    - "-1500" or "(1500)" (negative, rejected later by the services)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValidationError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValidationError("Empty amount string")

    text = amount_str.strip().translate(_DIGITS)

    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    text = _CURRENCY.sub("", text)
    text = text.replace("٬", "").replace(",", "").replace("٫", ".")
    text = text.replace(" ", "").strip()

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValidationError(f"Could not parse amount '{amount_str.strip()}'")
    if not amount.is_finite():
        raise ValidationError(f"Could not parse amount '{amount_str.strip()}'")
    return -amount if is_negative else amount

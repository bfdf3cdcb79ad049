"""Wallet classification.

A wallet's category is derived from its balance and the share of its monthly
limit still available. Rules are checked in a fixed order and the first match
wins, so a wallet with balance 5,000 and 95% of its limit left is
IdealForReceiving, not Unused.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import assert_never

from walletcycle.domain.entities import Wallet

SENDING_MIN_BALANCE = Decimal(50000)
SENDING_MIN_REMAINING_PCT = Decimal(50)
RECEIVING_MAX_BALANCE = Decimal(10000)
OVER_LIMIT_MIN_BALANCE = Decimal(20000)
OVER_LIMIT_MAX_REMAINING_PCT = Decimal(10)
UNUSED_MAX_BALANCE = Decimal(20000)
UNUSED_MIN_REMAINING_PCT = Decimal(90)


class WalletClassification(str, Enum):
    """Usage category of a wallet."""

    IDEAL_FOR_SENDING = "IdealForSending"
    IDEAL_FOR_RECEIVING = "IdealForReceiving"
    BALANCED = "Balanced"
    UNUSED = "Unused"
    OVER_LIMIT = "OverLimit"

    @property
    def label(self) -> str:
        """Human-readable name of the category."""
        match self:
            case WalletClassification.IDEAL_FOR_SENDING:
                return "Ideal for sending"
            case WalletClassification.IDEAL_FOR_RECEIVING:
                return "Ideal for receiving"
            case WalletClassification.BALANCED:
                return "Balanced"
            case WalletClassification.UNUSED:
                return "Unused"
            case WalletClassification.OVER_LIMIT:
                return "Over limit"
            case _:
                assert_never(self)

    @property
    def reason(self) -> str:
        """Why a wallet lands in this category."""
        match self:
            case WalletClassification.IDEAL_FOR_SENDING:
                return "High balance and enough limit room for large transfers"
            case WalletClassification.IDEAL_FOR_RECEIVING:
                return "Low balance, suitable to receive incoming transfers"
            case WalletClassification.BALANCED:
                return "Balance and remaining limit are in balance"
            case WalletClassification.UNUSED:
                return "Underutilized, the monthly limit is barely touched"
            case WalletClassification.OVER_LIMIT:
                return "High balance but the monthly limit is nearly exhausted"
            case _:
                assert_never(self)


@dataclass(frozen=True)
class ClassificationResult:
    """Category assigned to one wallet, with its justification."""

    wallet_id: str
    name: str
    classification: WalletClassification
    reason: str


def classify_wallet(wallet: Wallet) -> ClassificationResult:
    """Classify a wallet from its balance and remaining-limit percentage.

    Args:
        wallet: Wallet snapshot

    Returns:
        ClassificationResult for the wallet
    """
    remaining_pct = wallet.remaining_percentage
    balance = wallet.balance

    if balance > SENDING_MIN_BALANCE and remaining_pct > SENDING_MIN_REMAINING_PCT:
        classification = WalletClassification.IDEAL_FOR_SENDING
    elif balance < RECEIVING_MAX_BALANCE:
        classification = WalletClassification.IDEAL_FOR_RECEIVING
    elif balance > OVER_LIMIT_MIN_BALANCE and remaining_pct < OVER_LIMIT_MAX_REMAINING_PCT:
        classification = WalletClassification.OVER_LIMIT
    elif balance < UNUSED_MAX_BALANCE and remaining_pct > UNUSED_MIN_REMAINING_PCT:
        classification = WalletClassification.UNUSED
    else:
        classification = WalletClassification.BALANCED

    return ClassificationResult(
        wallet_id=wallet.id,
        name=wallet.name,
        classification=classification,
        reason=classification.reason,
    )

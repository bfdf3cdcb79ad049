"""Send/receive wallet rotation planner.

Money is received on the wallet with the most limit left and sent from the
most exhausted wallet that can still send, so that wallet is drained before
the two swap roles. Days left are projected linearly over a nominal 30-day
cycle, not from actual spend history.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Sequence
import math

from walletcycle.domain.entities import Wallet, round_percentage

CYCLE_DAYS = 30
URGENT_SWITCH_PCT = Decimal(20)
CAUTION_PCT = Decimal(50)
SWITCH_RECEIVE_MIN_BALANCE = Decimal(80000)
SWITCH_RECEIVE_MAX_BALANCE = Decimal(100000)
SEND_LOW_BALANCE = Decimal(20000)
CYCLE_TARGET_BALANCE = Decimal(100000)
RECEIVE_LOW_LIMIT_RATIO = Decimal("0.2")


class CycleStage(str, Enum):
    """How far the receive wallet has filled up in the current cycle."""

    START = "start"
    MIDDLE = "middle"
    END = "end"


@dataclass(frozen=True)
class CycleStrategy:
    """Recommended wallet pairing for the current cycle."""

    recommendation: str
    receive_wallet: Optional[Wallet] = None
    send_wallet: Optional[Wallet] = None
    days_until_limit_reached: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        """Whether both a receive and a send wallet were selected."""
        return self.receive_wallet is not None and self.send_wallet is not None

    @property
    def send_remaining_percentage(self) -> int:
        """Share of the send wallet's monthly limit left, rounded."""
        if self.send_wallet is None:
            return 0
        return round_percentage(self.send_wallet.remaining_percentage)

    @property
    def is_optimal_switch_point(self) -> bool:
        """Receive wallet is nearly full and the send wallet nearly empty."""
        if not self.is_complete:
            return False
        return (
            SWITCH_RECEIVE_MIN_BALANCE <= self.receive_wallet.balance <= SWITCH_RECEIVE_MAX_BALANCE
            and self.send_wallet.balance <= SEND_LOW_BALANCE
        )

    @property
    def is_warning_point(self) -> bool:
        """Send wallet runs dry before the receive wallet has filled up."""
        if not self.is_complete:
            return False
        return (
            self.send_wallet.balance < SEND_LOW_BALANCE
            and self.receive_wallet.balance < SWITCH_RECEIVE_MIN_BALANCE
        )

    @property
    def should_change_wallets(self) -> bool:
        """Either wallet is low enough on limit to swap roles now."""
        if not self.is_complete:
            return False
        receive = self.receive_wallet
        receive_ratio = (
            receive.remaining_limit / receive.monthly_limit if receive.monthly_limit else Decimal(0)
        )
        return (
            self.send_wallet.remaining_percentage < URGENT_SWITCH_PCT
            or receive_ratio < RECEIVE_LOW_LIMIT_RATIO
        )

    @property
    def cycle_stage(self) -> Optional[CycleStage]:
        """Stage of the cycle judged from the receive wallet balance."""
        if self.receive_wallet is None:
            return None
        if self.receive_wallet.balance < SEND_LOW_BALANCE:
            return CycleStage.START
        if self.receive_wallet.balance >= SWITCH_RECEIVE_MIN_BALANCE:
            return CycleStage.END
        return CycleStage.MIDDLE

    @property
    def cycle_completion_percentage(self) -> int:
        """Receive wallet balance as a share of the cycle target, capped at 100."""
        if self.receive_wallet is None:
            return 0
        return min(100, round_percentage(self.receive_wallet.balance / CYCLE_TARGET_BALANCE * 100))


def generate_cycle_strategy(wallets: Sequence[Wallet]) -> CycleStrategy:
    """Pick the receive and send wallets for the current cycle.

    Ties on remaining limit go to the wallet listed first.

    Args:
        wallets: Wallet snapshots (at least two for a full strategy)

    Returns:
        CycleStrategy with the chosen pair and a recommendation
    """
    if len(wallets) < 2:
        return CycleStrategy(
            recommendation="Add at least two wallets to use the send/receive cycle."
        )

    receive_wallet = max(wallets, key=lambda w: w.remaining_limit)
    candidates = [w for w in wallets if w.id != receive_wallet.id and w.remaining_limit > 0]

    if not candidates:
        return CycleStrategy(
            receive_wallet=receive_wallet,
            recommendation=(
                f"Receive on wallet {receive_wallet.name} and send from another wallet; "
                "the other wallets have used up their monthly limits."
            ),
        )

    send_wallet = min(candidates, key=lambda w: w.remaining_limit)

    remaining_pct = send_wallet.remaining_percentage
    days_until_limit_reached = math.ceil(remaining_pct / 100 * CYCLE_DAYS)
    pct = round_percentage(remaining_pct)

    if remaining_pct < URGENT_SWITCH_PCT:
        recommendation = (
            f"Switch wallet roles soon: send wallet {send_wallet.name} has only "
            f"{send_wallet.remaining_limit} left of its monthly limit ({pct}%). "
            f"Plan to start sending from {receive_wallet.name}."
        )
    elif remaining_pct < CAUTION_PCT:
        recommendation = (
            f"You can keep sending from wallet {send_wallet.name} a while longer, "
            f"but its remaining limit is relatively low ({pct}%). "
            f"Keep receiving on wallet {receive_wallet.name}."
        )
    else:
        recommendation = (
            f"The current cycle strategy is optimal. Keep receiving on wallet "
            f"{receive_wallet.name} and sending from wallet {send_wallet.name} "
            f"({pct}% of its limit left)."
        )

    return CycleStrategy(
        receive_wallet=receive_wallet,
        send_wallet=send_wallet,
        recommendation=recommendation,
        days_until_limit_reached=days_until_limit_reached,
    )

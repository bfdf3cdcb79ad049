"""Portfolio-wide wallet analysis and recommendations."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Sequence

from walletcycle.domain.classification import (
    ClassificationResult,
    WalletClassification,
    classify_wallet,
)
from walletcycle.domain.entities import LimitWarning, Wallet, round_percentage

LIMIT_WARNING_PCT = Decimal(30)
IMBALANCE_SHARE_PCT = Decimal(50)


@dataclass(frozen=True)
class WalletAnalysis:
    """Totals, distributions and advice for a set of wallets."""

    total_balance: Decimal
    total_limit: Decimal
    total_remaining_limit: Decimal
    wallet_distribution: dict[str, Decimal] = field(default_factory=dict)
    limit_distribution: dict[str, Decimal] = field(default_factory=dict)
    most_used_wallet: Optional[str] = None
    least_used_wallet: Optional[str] = None
    limit_warnings: tuple[LimitWarning, ...] = ()
    balance_imbalance: bool = False
    recommendations: tuple[str, ...] = ()
    classified_wallets: tuple[ClassificationResult, ...] = ()


def analyze_wallets(wallets: Sequence[Wallet]) -> WalletAnalysis:
    """Summarize a wallet set and suggest how to use it.

    Args:
        wallets: Wallet snapshots

    Returns:
        WalletAnalysis; for an empty set, zero totals and a hint to add a wallet
    """
    if not wallets:
        return WalletAnalysis(
            total_balance=Decimal(0),
            total_limit=Decimal(0),
            total_remaining_limit=Decimal(0),
            recommendations=("Add a wallet to start planning your transfers.",),
        )

    total_balance = sum((w.balance for w in wallets), Decimal(0))
    total_limit = sum((w.monthly_limit for w in wallets), Decimal(0))
    total_remaining_limit = sum((w.remaining_limit for w in wallets), Decimal(0))

    wallet_distribution = {
        w.id: (w.balance / total_balance * 100 if total_balance else Decimal(0))
        for w in wallets
    }
    limit_distribution = {w.id: w.remaining_percentage for w in wallets}

    # Most used = smallest share of limit left
    by_usage = sorted(wallets, key=lambda w: w.remaining_percentage)
    most_used_wallet = by_usage[0].id
    least_used_wallet = by_usage[-1].id

    limit_warnings = tuple(
        LimitWarning(wallet_id=w.id, name=w.name, remaining_percentage=w.remaining_percentage)
        for w in wallets
        if w.remaining_percentage < LIMIT_WARNING_PCT
    )
    balance_imbalance = max(wallet_distribution.values()) > IMBALANCE_SHARE_PCT
    classified = tuple(classify_wallet(w) for w in wallets)

    recommendations = []
    for warning in limit_warnings:
        recommendations.append(
            f"Wallet {warning.name} is close to its monthly limit "
            f"({round_percentage(warning.remaining_percentage)}% left). Consider using another wallet."
        )

    if balance_imbalance:
        recommendations.append("Spread your balance more evenly across wallets to reduce risk.")

    if len(wallets) == 1:
        recommendations.append(
            "Add another wallet to use the send/receive cycle and raise your usable monthly limit."
        )
    else:
        senders = [c for c in classified if c.classification is WalletClassification.IDEAL_FOR_SENDING]
        receivers = [c for c in classified if c.classification is WalletClassification.IDEAL_FOR_RECEIVING]
        over_limit = [c for c in classified if c.classification is WalletClassification.OVER_LIMIT]

        if senders and receivers:
            recommendations.append(
                f"Send from wallet {senders[0].name} and receive on wallet {receivers[0].name} "
                "to get the most out of your monthly limits."
            )
        if over_limit:
            recommendations.append(
                f"Avoid sending from wallet {over_limit[0].name}; its monthly limit is nearly used up."
            )

    return WalletAnalysis(
        total_balance=total_balance,
        total_limit=total_limit,
        total_remaining_limit=total_remaining_limit,
        wallet_distribution=wallet_distribution,
        limit_distribution=limit_distribution,
        most_used_wallet=most_used_wallet,
        least_used_wallet=least_used_wallet,
        limit_warnings=limit_warnings,
        balance_imbalance=balance_imbalance,
        recommendations=tuple(recommendations),
        classified_wallets=classified,
    )

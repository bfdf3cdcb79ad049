"""Tests for wallet classification."""

import pytest

from walletcycle.domain.classification import WalletClassification, classify_wallet


@pytest.mark.parametrize(
    "balance,remaining,expected",
    [
        ("60000", "120000", WalletClassification.IDEAL_FOR_SENDING),
        ("5000", "190000", WalletClassification.IDEAL_FOR_RECEIVING),
        ("5000", "0", WalletClassification.IDEAL_FOR_RECEIVING),
        ("30000", "10000", WalletClassification.OVER_LIMIT),
        ("15000", "190000", WalletClassification.UNUSED),
        ("15000", "100000", WalletClassification.BALANCED),
        ("60000", "80000", WalletClassification.BALANCED),
        ("50000", "200000", WalletClassification.BALANCED),
    ],
)
def test_classify_wallet(make_wallet, balance, remaining, expected):
    """Rules are applied in order and the first match wins."""
    wallet = make_wallet(balance=balance, remaining_limit=remaining)

    result = classify_wallet(wallet)

    assert result.classification is expected
    assert result.reason == expected.reason
    assert result.wallet_id == wallet.id


def test_receiving_beats_unused(make_wallet):
    """A low balance with almost all of the limit left is for receiving."""
    result = classify_wallet(make_wallet(balance="5000", remaining_limit="190000"))

    assert result.classification.value == "IdealForReceiving"
    assert result.classification.label == "Ideal for receiving"


def test_classification_is_deterministic(make_wallet):
    """The same snapshot always gets the same category."""
    wallet = make_wallet(balance="25000", remaining_limit="15000")

    assert {classify_wallet(wallet).classification for _ in range(5)} == {
        WalletClassification.OVER_LIMIT
    }

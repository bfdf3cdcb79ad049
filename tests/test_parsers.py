"""Tests for amount and date parsing utilities."""

from datetime import date
from decimal import Decimal

import pytest

from walletcycle.domain.errors import ValidationError
from walletcycle.utils.amount_parser import parse_amount
from walletcycle.utils.date_parser import get_date_range, parse_date

TODAY = date(2024, 3, 14)  # a Thursday


class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1500", Decimal("1500")),
            ("1,500.50", Decimal("1500.50")),
            ("EGP 1,500", Decimal("1500")),
            ("1500 ج.م", Decimal("1500")),
            ("١٥٠٠", Decimal("1500")),
            ("١٬٥٠٠٫٥٠", Decimal("1500.50")),
            ("250 جنيه", Decimal("250")),
            ("(300)", Decimal("-300")),
        ],
    )
    def test_formats(self, text, expected):
        """Common local formats are understood."""
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "abc", "12..5"])
    def test_invalid(self, text):
        """Unparseable input raises ValidationError."""
        with pytest.raises(ValidationError):
            parse_amount(text)


class TestParseDate:
    """Tests for parse_date."""

    def test_relative_dates(self):
        """Relative words resolve against the reference date."""
        assert parse_date("today", today=TODAY) == TODAY
        assert parse_date("yesterday", today=TODAY) == date(2024, 3, 13)
        assert parse_date("this month", today=TODAY) == date(2024, 3, 1)
        assert parse_date("last month", today=TODAY) == date(2024, 2, 1)
        assert parse_date("this week", today=TODAY) == date(2024, 3, 11)
        assert parse_date("last week", today=TODAY) == date(2024, 3, 4)

    def test_last_weekday(self):
        """'last <day>' is the most recent earlier such day."""
        assert parse_date("last friday", today=TODAY) == date(2024, 3, 8)
        assert parse_date("last thursday", today=TODAY) == date(2024, 3, 7)

    def test_iso_and_day_first(self):
        """ISO dates parse as-is; slashed dates are read day first."""
        assert parse_date("2024-01-05") == date(2024, 1, 5)
        assert parse_date("05/01/2024") == date(2024, 1, 5)

    def test_invalid(self):
        """Garbage raises ValidationError."""
        with pytest.raises(ValidationError, match="Could not parse date"):
            parse_date("not a date")


class TestGetDateRange:
    """Tests for get_date_range."""

    def test_periods(self):
        """Named periods map to inclusive date ranges."""
        assert get_date_range("this-month", today=TODAY) == (date(2024, 3, 1), TODAY)
        assert get_date_range("last-month", today=TODAY) == (date(2024, 2, 1), date(2024, 2, 29))
        assert get_date_range("this-week", today=TODAY) == (date(2024, 3, 11), TODAY)
        assert get_date_range("last-week", today=TODAY) == (date(2024, 3, 4), date(2024, 3, 10))
        assert get_date_range("cycle", today=TODAY) == (date(2024, 3, 1), date(2024, 3, 31))

    def test_unknown_period(self):
        """Unknown periods are rejected."""
        with pytest.raises(ValidationError, match="Unknown period"):
            get_date_range("next-decade")

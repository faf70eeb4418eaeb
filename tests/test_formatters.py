"""Tests for pt-BR formatting and form parsing."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from loan_tracker.formatters import (
    collation_key,
    format_currency,
    format_date,
    format_percentage,
    parse_integer,
    parse_number,
)


class TestFormatCurrency:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (Decimal("1234.56"), "R$ 1.234,56"),
            (Decimal("1234567.891"), "R$ 1.234.567,89"),
            (0, "R$ 0,00"),
            (Decimal("0.005"), "R$ 0,01"),
            (-1234.5, "-R$ 1.234,50"),
            ("99.9", "R$ 99,90"),
        ],
    )
    def test_format(self, value, expected) -> None:
        assert format_currency(value) == expected


class TestFormatDate:
    def test_date(self) -> None:
        assert format_date(date(2024, 9, 5)) == "05/09/2024"

    def test_iso_string(self) -> None:
        assert format_date("2024-09-05T10:00:00") == "05/09/2024"

    def test_datetime(self) -> None:
        assert format_date(datetime(2024, 12, 31, 23, 59)) == "31/12/2024"

    def test_missing(self) -> None:
        assert format_date(None) == ""
        assert format_date("") == ""


class TestFormatPercentage:
    def test_two_decimals(self) -> None:
        assert format_percentage(Decimal("1.25")) == "1.25%"
        assert format_percentage(1.5) == "1.50%"


class TestParseNumber:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1.234,56", Decimal("1234.56")),
            ("1234,5", Decimal("1234.5")),
            ("1234.56", Decimal("1234.56")),
            (" 12 ", Decimal("12")),
            ("", Decimal("0")),
            ("abc", Decimal("0")),
            ("NaN", Decimal("0")),
        ],
    )
    def test_parse(self, text, expected) -> None:
        assert parse_number(text) == expected

    def test_parse_integer_rounds_half_up(self) -> None:
        assert parse_integer("24") == 24
        assert parse_integer("2,5") == 3

    def test_parse_integer_clamps_negative(self) -> None:
        assert parse_integer("-3") == 0


class TestCollationKey:
    def test_ignores_accents_and_case(self) -> None:
        assert collation_key("Álvaro") == collation_key("alvaro")

    def test_orders_like_pt_br(self) -> None:
        names = ["Zeta", "érica", "Ana", "Éder"]

        assert sorted(names, key=collation_key) == ["Ana", "Éder", "érica", "Zeta"]

"""Unit tests for monetary normalization"""

import pytest
from finance_tracker.domain.models import Expense, Income
from finance_tracker.domain.money import format_currency, get_currency, monthly_amount, percentage_change


@pytest.mark.parametrize(
    "amount,frequency,expected",
    [
        (100, "weekly", 433.0),
        (100, "biweekly", 217.0),
        (100, "monthly", 100.0),
        (1200, "yearly", 100.0),
        (100, "fortnightly-ish", 100.0),
    ],
)
def test_monthly_amount(amount, frequency, expected):
    """Test frequency multipliers, unknown frequencies treated as monthly"""
    assert monthly_amount(amount, frequency) == pytest.approx(expected)


def test_record_monthly_amount_is_derived():
    """Test income/expense monthly amounts always agree with the normalizer"""
    income = Income(id="i", source="Gig", amount=250, frequency="weekly")
    expense = Expense(id="e", name="Gym", amount=600, frequency="yearly", category="want")

    assert income.monthly_amount == pytest.approx(monthly_amount(250, "weekly"))
    assert expense.monthly_amount == pytest.approx(50.0)


def test_format_currency_rounds_and_groups():
    """Test canonical display with thousands separators and no decimals"""
    assert format_currency(1234.6) == "KSh 1,235"
    assert format_currency(0) == "KSh 0"


def test_format_currency_negative_prefix():
    """Test negative amounts get a leading minus"""
    assert format_currency(-1234.6) == "-KSh 1,235"


def test_get_currency_lookup():
    """Test known codes resolve case-insensitively, unknown codes display bare"""
    assert get_currency("usd").symbol == "$"
    assert get_currency(None).code == "KES"
    assert get_currency("XYZ").symbol == "XYZ"
    assert format_currency(50, get_currency("XYZ")) == "XYZ 50"


def test_percentage_change():
    """Test percent change including zero baselines"""
    assert percentage_change(150, 100) == pytest.approx(50.0)
    assert percentage_change(50, -100) == pytest.approx(150.0)
    assert percentage_change(5, 0) == 100.0
    assert percentage_change(0, 0) == 0.0

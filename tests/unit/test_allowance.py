"""Unit tests for the spending allowance calculator"""

import pytest
from datetime import timedelta
from finance_tracker.domain.allowance import calculate_spending_allowance
from finance_tracker.domain.models import (
    BusinessEntry,
    Expense,
    FinancialGoal,
    FinancialSnapshot,
    Income,
    Loan,
    UserPreferences,
)


def _snapshot(wants: float, income: float = 5000, **kwargs) -> FinancialSnapshot:
    return FinancialSnapshot(
        incomes=(Income(id="i", source="Salary", amount=income, frequency="monthly"),) if income else (),
        expenses=(
            Expense(id="rent", name="Rent", amount=1500, frequency="monthly", category="need"),
            Expense(id="fun", name="Fun", amount=wants, frequency="monthly", category="want"),
        ),
        **kwargs,
    )


def test_within_budget(today):
    """Test 30% of income as the ceiling with headroom reported"""
    allowance = calculate_spending_allowance(_snapshot(1000), UserPreferences(), today)

    assert allowance.allowed_wants_spending == pytest.approx(1500.0)
    assert allowance.current_wants_spending == pytest.approx(1000.0)
    assert allowance.remaining_wants_allowance == pytest.approx(500.0)
    assert allowance.can_spend is True
    assert allowance.recommendations == ["You have KSh 500 available for wants this month"]
    assert allowance.restrictions == []


def test_over_budget(today):
    """Test overspending produces restrictions and blocks can_spend"""
    allowance = calculate_spending_allowance(_snapshot(2000), UserPreferences(), today)

    assert allowance.remaining_wants_allowance == pytest.approx(-500.0)
    assert allowance.can_spend is False
    assert allowance.restrictions[0] == "You've exceeded your monthly wants budget by KSh 500"


def test_low_allowance_warning(today):
    """Test headroom under 20% of the ceiling gets a mindful-spending note"""
    allowance = calculate_spending_allowance(_snapshot(1300), UserPreferences(currency="USD"), today)

    assert allowance.recommendations[0] == (
        "You have $ 200 left for wants this month (less than 20% of your budget)"
    )


def test_high_debt_restriction(today):
    """Test debt above three months of income adds restrictions"""
    loan = Loan(id="L", name="Mortgage", principal=20000, current_balance=20000, interest_rate=1, minimum_payment=200)

    allowance = calculate_spending_allowance(_snapshot(500, loans=(loan,)), UserPreferences(), today)

    assert "Your debt level is high relative to income" in allowance.restrictions
    assert allowance.can_spend is True


def test_zero_income(today):
    """Test no income means no allowance"""
    allowance = calculate_spending_allowance(_snapshot(100, income=0), UserPreferences(), today)

    assert allowance.allowed_wants_spending == 0.0
    assert allowance.can_spend is False


def test_business_profit_raises_ceiling(today):
    """Test business contribution counts toward the wants ceiling"""
    entry = BusinessEntry("b", today - timedelta(days=3), sales=3000, stock_value=0, profit=1000)

    allowance = calculate_spending_allowance(
        _snapshot(0, business_entries=(entry,)), UserPreferences(), today
    )

    assert allowance.allowed_wants_spending == pytest.approx(1800.0)


def test_lagging_goals_note(today):
    """Test goals behind schedule are called out"""
    goal = FinancialGoal(
        id="g",
        name="House",
        target_amount=10000,
        current_amount=0,
        target_date=today + timedelta(days=10),
        category="purchase",
        priority="high",
        created_at=today - timedelta(days=300),
    )

    allowance = calculate_spending_allowance(_snapshot(100, goals=(goal,)), UserPreferences(), today)

    assert "You have 1 financial goals that need attention" in allowance.recommendations

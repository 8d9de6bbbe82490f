"""Unit tests for the financial health scorer"""

import pytest
from datetime import timedelta
from finance_tracker.domain.health import (
    calculate_emergency_preparedness,
    calculate_financial_health,
    generate_health_improvement_steps,
    health_level,
)
from finance_tracker.domain.models import (
    BankAccount,
    BusinessEntry,
    Expense,
    FinancialSnapshot,
    Income,
    Loan,
)


def test_empty_profile_scores_zero(today):
    """Test a user with no records scores 0 and is poor"""
    health = calculate_financial_health(FinancialSnapshot(), today)

    assert health.score == 0
    assert health.level == "poor"


def test_emergency_ratio_half_awards_ten_points(today):
    """Test emergency ratio 0.5 lands in the 10-point bucket"""
    snapshot = FinancialSnapshot(
        bank_accounts=(BankAccount(id="sav", name="Savings", type="savings", balance=3000),),
        incomes=(Income(id="i", source="Salary", amount=5000, frequency="monthly"),),
        expenses=(Expense(id="e", name="Rent", amount=1000, frequency="monthly", category="need"),),
    )

    health = calculate_financial_health(snapshot, today)

    # 30 (no debt) + 30 (80% savings) + 10 (ratio 0.5) + 4 (positive net worth) + 0 + 0
    assert health.emergency_fund_ratio == pytest.approx(0.5)
    assert health.score == 74
    assert health.level == "good"


def test_zero_income_floor(today):
    """Test zero income means 100% debt-to-income and a zero savings rate"""
    snapshot = FinancialSnapshot(
        loans=(Loan(id="L", name="Loan", principal=1000, current_balance=1000, interest_rate=5, minimum_payment=100),),
    )

    health = calculate_financial_health(snapshot, today)

    assert health.debt_to_income_ratio == 100.0
    assert health.savings_rate == 0.0
    # 5 (dti) + 10 (zero savings) + 0 + 0 + 0 + 0
    assert health.score == 15
    assert health.suggested_strategy == "debt-focused"


def test_business_profit_counts_as_income(today):
    """Test business contribution feeds income and the business bucket"""
    snapshot = FinancialSnapshot(
        incomes=(Income(id="i", source="Salary", amount=1000, frequency="monthly"),),
        business_entries=(BusinessEntry("b", today - timedelta(days=2), sales=2000, stock_value=0, profit=1000),),
    )

    health = calculate_financial_health(snapshot, today)

    assert health.business_contribution == pytest.approx(1000.0)
    assert health.savings_rate == pytest.approx(100.0)


@pytest.mark.parametrize(
    "snapshot_name",
    ["salaried_snapshot", "indebted_snapshot"],
)
def test_score_bounds(snapshot_name, request, today):
    """Test every profile scores within 0..100 and above 0 when not empty"""
    snapshot = request.getfixturevalue(snapshot_name)

    health = calculate_financial_health(snapshot, today)

    assert 0 < health.score <= 100
    assert health.level == health_level(health.score)


def test_best_profile_reaches_hundred(today):
    """Test a profile maxing every bucket scores exactly 100"""
    snapshot = FinancialSnapshot(
        bank_accounts=(BankAccount(id="sav", name="Savings", type="savings", balance=500000),),
        incomes=tuple(Income(id=f"i{n}", source=f"Job {n}", amount=1000, frequency="monthly") for n in range(3)),
        expenses=(Expense(id="e", name="Rent", amount=500, frequency="monthly", category="need"),),
        business_entries=(BusinessEntry("b", today, sales=5000, stock_value=0, profit=2000),),
    )

    assert calculate_financial_health(snapshot, today).score == 100


def test_health_level_thresholds():
    """Test score to level mapping"""
    assert health_level(80) == "excellent"
    assert health_level(79) == "good"
    assert health_level(60) == "good"
    assert health_level(40) == "fair"
    assert health_level(39) == "poor"


def test_recommendations_order(indebted_snapshot, today):
    """Test recommendations appear in a stable, documented order"""
    health = calculate_financial_health(indebted_snapshot, today)

    # debt-to-income ~12.7% and savings rate ~25.7% need no advice here
    assert health.recommendations == [
        "Build your emergency fund to cover at least 3-6 months of expenses",
        "Work on increasing your net worth by paying down debt and building assets",
        "Consider developing additional income streams to increase financial security",
    ]


def test_improvement_steps_ranked(indebted_snapshot, today):
    """Test improvement steps are sorted by impact plus ease"""
    health = calculate_financial_health(indebted_snapshot, today)
    steps = generate_health_improvement_steps(health, indebted_snapshot)
    impact = {"high": 3, "medium": 2, "low": 1}
    ease = {"easy": 3, "medium": 2, "hard": 1}
    weights = [impact[s.impact] + ease[s.difficulty] for s in steps]

    assert weights == sorted(weights, reverse=True)
    assert "account-debt-chk" in [s.id for s in steps]


def test_improvement_steps_empty_profile():
    """Test nothing to improve without records"""
    health = calculate_financial_health(FinancialSnapshot())
    assert generate_health_improvement_steps(health, FinancialSnapshot()) == []


def test_emergency_preparedness_empty():
    """Test empty profile is unprepared with starter recommendations"""
    result = calculate_emergency_preparedness(FinancialSnapshot())

    assert result.score == 0
    assert result.level == "unprepared"
    assert len(result.recommendations) == 3


def test_emergency_preparedness_bounded(salaried_snapshot):
    """Test preparedness score stays within 0..100"""
    result = calculate_emergency_preparedness(salaried_snapshot)

    # liquid 5000 over 2000 expenses: 2.5 months
    assert result.emergency_fund_months == pytest.approx(2.5)
    assert 0 <= result.score <= 100


def test_health_is_repeatable(indebted_snapshot, today):
    """Test scoring the same snapshot twice gives identical results"""
    assert calculate_financial_health(indebted_snapshot, today) == calculate_financial_health(
        indebted_snapshot, today
    )

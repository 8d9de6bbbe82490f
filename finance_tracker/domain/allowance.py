"""Discretionary spending allowance (the "30" of 50/30/20)"""

from datetime import date
from typing import List
from finance_tracker.domain import aggregates
from finance_tracker.domain.goals import calculate_goal_progress
from finance_tracker.domain.models import FinancialSnapshot, UserPreferences
from finance_tracker.domain.money import format_currency, get_currency
from finance_tracker.domain.results import SpendingAllowance
from finance_tracker.domain.rules import HIGH_DEBT_INCOME_MULTIPLE, LOW_ALLOWANCE_SHARE, WANTS_INCOME_SHARE


def calculate_spending_allowance(
    snapshot: FinancialSnapshot,
    preferences: UserPreferences,
    today: date | None = None,
) -> SpendingAllowance:
    """
    Headroom left in the monthly wants budget.

    The ceiling is 30% of income including business profit. The result is
    advisory only: nothing is blocked, the strings explain the headroom.
    """
    currency = get_currency(preferences.currency)
    income = aggregates.total_monthly_income(snapshot.incomes) + aggregates.business_contribution(
        snapshot.business_entries, today
    )
    wants = aggregates.total_monthly_expenses([e for e in snapshot.expenses if e.category == "want"])

    allowed = income * WANTS_INCOME_SHARE
    remaining = allowed - wants

    recommendations: List[str] = []
    restrictions: List[str] = []

    if remaining < 0:
        restrictions.append(f"You've exceeded your monthly wants budget by {format_currency(abs(remaining), currency)}")
        restrictions.append("Consider reducing non-essential spending for the rest of the month")
    elif remaining < allowed * LOW_ALLOWANCE_SHARE:
        recommendations.append(
            f"You have {format_currency(remaining, currency)} left for wants this month (less than 20% of your budget)"
        )
        recommendations.append("Be mindful of additional discretionary spending")
    else:
        recommendations.append(f"You have {format_currency(remaining, currency)} available for wants this month")

    debt = aggregates.total_debt(snapshot.loans, snapshot.bank_accounts)
    if debt > 0 and debt > income * HIGH_DEBT_INCOME_MULTIPLE:
        restrictions.append("Your debt level is high relative to income")
        restrictions.append("Consider prioritizing debt repayment over discretionary spending")

    lagging = [
        goal
        for goal in snapshot.goals
        if calculate_goal_progress(goal, today).status in ("behind", "at-risk")
    ]
    if lagging:
        recommendations.append(f"You have {len(lagging)} financial goals that need attention")
        recommendations.append("Consider allocating more to goals instead of discretionary spending")

    return SpendingAllowance(
        allowed_wants_spending=allowed,
        current_wants_spending=wants,
        remaining_wants_allowance=remaining,
        can_spend=remaining > 0,
        recommendations=recommendations,
        restrictions=restrictions,
    )

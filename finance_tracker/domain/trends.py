"""Month-over-month trend tracking"""

from datetime import date
from typing import List, Sequence
from finance_tracker.domain import aggregates
from finance_tracker.domain.models import FinancialSnapshot
from finance_tracker.domain.results import TrendAssessment, TrendComparison, TrendPoint
from finance_tracker.utils.date_utils import in_window, month_bounds

TREND_MONTHS = 6
STABLE_CHANGE_PERCENT = 1
HIGH_DEBT_INCOME_MONTHS = 6


def build_trend(snapshot: FinancialSnapshot, months: int = TREND_MONTHS, today: date | None = None) -> List[TrendPoint]:
    """
    One point per calendar month, oldest first, ending with the current month.

    Recurring income/expenses are the same every month; daily entries and
    business profit are summed per month. Debt and net worth are current
    figures, so they only move between refreshes of the records.
    """
    if today is None:
        today = date.today()

    monthly_income = aggregates.total_monthly_income(snapshot.incomes)
    monthly_expenses = aggregates.total_monthly_expenses(snapshot.expenses)
    total_debt = aggregates.total_debt(snapshot.loans, snapshot.bank_accounts)
    net_worth = aggregates.net_worth(
        snapshot.bank_accounts, snapshot.loans, snapshot.goals, snapshot.expected_payments
    )

    points: List[TrendPoint] = []
    for months_back in range(months - 1, -1, -1):
        start, end = month_bounds(today, months_back)
        daily = [e for e in snapshot.daily_entries if in_window(e.date, start, end)]
        business_profit = sum((e.profit for e in snapshot.business_entries if in_window(e.date, start, end)), 0.0)

        income = monthly_income + sum((e.income for e in daily), 0.0)
        expenses = monthly_expenses + sum((e.expenses for e in daily), 0.0)
        points.append(
            TrendPoint(
                period_start=start,
                income=income,
                expenses=expenses,
                net_income=income - expenses,
                business_profit=business_profit,
                total_debt=total_debt,
                net_worth=net_worth,
            )
        )
    return points


def _compare(metric: str, current: float, previous: float, good_when_up: bool) -> TrendComparison:
    change = current - previous
    change_percent = change / abs(previous) * 100 if previous != 0 else 0.0

    if abs(change_percent) < STABLE_CHANGE_PERCENT:
        trend = "stable"
    elif change > 0:
        trend = "up"
    else:
        trend = "down"

    if good_when_up:
        is_good = trend in ("up", "stable")
    else:
        is_good = trend in ("down", "stable")

    return TrendComparison(
        metric=metric,
        current=current,
        previous=previous,
        change=change,
        change_percent=change_percent,
        trend=trend,
        is_good=is_good,
    )


def compare_trend_points(points: Sequence[TrendPoint]) -> List[TrendComparison]:
    """Compare the last two points; fewer than two points gives no comparisons"""
    if len(points) < 2:
        return []
    current, previous = points[-1], points[-2]
    return [
        _compare("Total Income", current.income, previous.income, True),
        _compare("Total Expenses", current.expenses, previous.expenses, False),
        _compare("Net Income", current.net_income, previous.net_income, True),
        _compare("Business Profit", current.business_profit, previous.business_profit, True),
        _compare("Total Debt", current.total_debt, previous.total_debt, False),
        _compare("Net Worth", current.net_worth, previous.net_worth, True),
    ]


def assess_trend(points: Sequence[TrendPoint], comparisons: Sequence[TrendComparison]) -> TrendAssessment:
    """
    Overall direction of the user's finances.

    Critical indicators on the latest point win over the share of good
    comparisons: negative net worth with negative net income is poor;
    debt above six months of income or negative net income is declining.
    """
    if not comparisons or not points:
        return TrendAssessment(status="stable", message="No data available for comparison")

    latest = points[-1]
    net_worth_negative = latest.net_worth < 0
    negative_net_income = latest.net_income < 0
    high_debt = latest.total_debt > 0 and latest.total_debt > latest.income * HIGH_DEBT_INCOME_MONTHS

    if net_worth_negative and negative_net_income:
        return TrendAssessment(
            status="poor",
            message="Your financial situation is poor. Focus on increasing income and reducing "
            "expenses to improve your net worth.",
        )
    if high_debt or negative_net_income:
        return TrendAssessment(
            status="declining",
            message="Your financial situation is declining. Address debt levels and ensure income exceeds expenses.",
        )

    good_share = sum(1 for c in comparisons if c.is_good) / len(comparisons) * 100
    if good_share >= 80:
        return TrendAssessment(status="improving", message="Your financial situation is improving significantly!")
    elif good_share >= 60:
        return TrendAssessment(
            status="stable", message="Your financial situation is relatively stable with some positive trends."
        )
    elif good_share >= 40:
        return TrendAssessment(
            status="mixed",
            message="Your financial situation shows mixed results. Focus on key areas for improvement.",
        )
    return TrendAssessment(
        status="declining",
        message="Your financial situation needs attention. Consider reviewing your budget and expenses.",
    )

"""Dashboard summary - one consistent bundle of derived figures"""

import logging
from datetime import date
from finance_tracker.domain import aggregates
from finance_tracker.domain.allocation import calculate_auto_allocation
from finance_tracker.domain.allowance import calculate_spending_allowance
from finance_tracker.domain.goals import calculate_goal_progress
from finance_tracker.domain.health import calculate_financial_health
from finance_tracker.domain.models import FinancialSnapshot, UserPreferences
from finance_tracker.domain.results import DashboardSummary

logger = logging.getLogger(__name__)

URGENT_GOAL_DAYS = 90


def build_dashboard_summary(
    snapshot: FinancialSnapshot,
    preferences: UserPreferences,
    today: date | None = None,
    upcoming_days: int = 7,
) -> DashboardSummary:
    """
    Everything the overview screen shows, derived from one snapshot.

    Health is scored once and handed to the allocation engine so both
    read the same figures.
    """
    if today is None:
        today = date.today()

    health = calculate_financial_health(snapshot, today)
    allocation = calculate_auto_allocation(snapshot, preferences, health=health, today=today)
    allowance = calculate_spending_allowance(snapshot, preferences, today)

    progresses = [calculate_goal_progress(goal, today) for goal in snapshot.goals]

    summary = DashboardSummary(
        net_worth=aggregates.net_worth(
            snapshot.bank_accounts, snapshot.loans, snapshot.goals, snapshot.expected_payments
        ),
        total_monthly_income=aggregates.total_monthly_income(snapshot.incomes),
        total_monthly_expenses=aggregates.total_monthly_expenses(snapshot.expenses),
        total_needs=aggregates.total_monthly_expenses([e for e in snapshot.expenses if e.category == "need"]),
        total_wants=aggregates.total_monthly_expenses([e for e in snapshot.expenses if e.category == "want"]),
        total_debt=aggregates.total_debt(snapshot.loans, snapshot.bank_accounts),
        health=health,
        allowance=allowance,
        allocation=allocation,
        goals_on_track=sum(1 for p in progresses if p.is_on_track),
        goals_completed=sum(1 for p in progresses if p.progress_percentage >= 100),
        urgent_goals=sum(1 for p in progresses if not p.is_on_track and p.days_remaining <= URGENT_GOAL_DAYS),
        upcoming_bills=aggregates.upcoming_bills(snapshot.bills, upcoming_days, today),
        upcoming_expected_payments=aggregates.upcoming_expected_payments(
            snapshot.expected_payments, upcoming_days, today
        ),
        overdue_expected_payments=aggregates.overdue_expected_payments(snapshot.expected_payments, today),
    )
    logger.debug("dashboard built score=%s net_worth=%.2f", health.score, summary.net_worth)
    return summary

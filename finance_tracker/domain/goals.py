"""Goal progress projection and forecasting"""

import math
from datetime import date
from typing import List
from finance_tracker.domain.models import FinancialGoal
from finance_tracker.domain.results import GoalForecast, GoalMilestone, GoalProgress
from finance_tracker.domain.rules import (
    DAYS_PER_MONTH,
    GOAL_AHEAD_OFFSET,
    GOAL_BEHIND_OFFSET,
    GOAL_ON_TRACK_OFFSET,
    NEVER_PAYOFF_MONTHS,
)
from finance_tracker.utils.date_utils import add_months, days_between

MILESTONE_PERCENTAGES = (25, 50, 75, 100)
MIN_SUCCESS_PROBABILITY = 20


def progress_percentage(goal: FinancialGoal) -> float:
    """Share of the target already saved; a zero target counts as complete"""
    if goal.target_amount <= 0:
        return 100.0
    return goal.current_amount / goal.target_amount * 100


def elapsed_percentage(goal: FinancialGoal, days_remaining: int, today: date) -> float:
    """Share of the goal's lifetime (creation -> target date) already used up"""
    created = goal.created_at or today
    days_elapsed = max(0, days_between(created, today))
    lifetime = days_remaining + days_elapsed
    if lifetime <= 0:
        return 100.0
    return 100 - days_remaining / lifetime * 100


def goal_status(progress: float, elapsed: float) -> str:
    if progress >= elapsed + GOAL_AHEAD_OFFSET:
        return "ahead"
    elif progress >= elapsed + GOAL_ON_TRACK_OFFSET:
        return "on-track"
    elif progress >= elapsed + GOAL_BEHIND_OFFSET:
        return "behind"
    return "at-risk"


def calculate_goal_progress(goal: FinancialGoal, today: date | None = None) -> GoalProgress:
    """
    Project a goal against its deadline.

    Requirements:
    - days_remaining never negative; months_remaining at least 1
    - monthly_required spreads the remaining amount over months_remaining
    - status compares saved % with elapsed-time %:
      ahead (>= +10), on-track (>= -10), behind (>= -25), else at-risk
    """
    if today is None:
        today = date.today()

    days_remaining = max(0, days_between(today, goal.target_date))
    months_remaining = max(1, math.ceil(days_remaining / DAYS_PER_MONTH))

    progress = progress_percentage(goal)
    remaining_amount = max(0.0, goal.target_amount - goal.current_amount)
    monthly_required = remaining_amount / months_remaining

    elapsed = elapsed_percentage(goal, days_remaining, today)

    return GoalProgress(
        goal_id=goal.id,
        goal_name=goal.name,
        target_amount=goal.target_amount,
        current_amount=goal.current_amount,
        target_date=goal.target_date,
        days_remaining=days_remaining,
        months_remaining=months_remaining,
        progress_percentage=progress,
        elapsed_percentage=elapsed,
        monthly_required=monthly_required,
        is_on_track=progress >= elapsed,
        status=goal_status(progress, elapsed),
    )


def _months_at_pace(amount: float, pace: float) -> int:
    if amount <= 0:
        return 0
    if pace <= 0:
        return NEVER_PAYOFF_MONTHS
    return min(NEVER_PAYOFF_MONTHS, math.ceil(amount / pace))


def generate_goal_forecast(
    goal: FinancialGoal,
    monthly_income: float,
    monthly_expenses: float,
    savings_rate: float,
    today: date | None = None,
) -> GoalForecast:
    """
    Forecast when a goal completes at the current savings pace.

    Probability of success is 100 when the pace covers the monthly need,
    otherwise proportional to it with a floor of 20.
    Projected dates are capped at NEVER_PAYOFF_MONTHS (999) months out, which
    is also what a zero or negative savings pace yields.
    """
    if today is None:
        today = date.today()

    remaining = max(0.0, goal.target_amount - goal.current_amount)
    months_remaining = max(1, math.ceil(days_between(today, goal.target_date) / DAYS_PER_MONTH))

    available = (monthly_income - monthly_expenses) * (savings_rate / 100)
    needed = remaining / months_remaining

    probability = 100.0
    if needed > 0 and needed > available:
        probability = max(MIN_SUCCESS_PROBABILITY, available / needed * 100)

    milestones: List[GoalMilestone] = []
    for percentage in MILESTONE_PERCENTAGES:
        amount = goal.target_amount * percentage / 100
        months_to_milestone = _months_at_pace(amount - goal.current_amount, available)
        milestones.append(
            GoalMilestone(
                percentage=percentage,
                amount=amount,
                estimated_date=add_months(today, months_to_milestone),
                achieved=goal.current_amount >= amount,
            )
        )

    adjustments: List[str] = []
    if probability < 80:
        adjustments.append(
            f"Increase monthly contribution by {(needed - available) * 1.1:,.0f} to improve success rate"
        )
        adjustments.append("Consider extending target date by 3-6 months")
        adjustments.append("Review and reduce non-essential expenses")
    if probability > 95:
        adjustments.append("Consider increasing goal amount or setting additional goals")
        adjustments.append("Explore investment options for excess savings")

    return GoalForecast(
        goal_id=goal.id,
        projected_completion_date=add_months(today, _months_at_pace(remaining, available)),
        monthly_contribution_needed=needed,
        probability_of_success=round(probability),
        recommended_adjustments=adjustments,
        milestones=milestones,
    )

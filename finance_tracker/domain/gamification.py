"""Gamification - challenges, points, levels, streaks and celebrations"""

import logging
from dataclasses import replace
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence, Set, Tuple
from finance_tracker.domain import aggregates
from finance_tracker.domain.goals import progress_percentage
from finance_tracker.domain.models import (
    Challenge,
    FinancialGoal,
    FinancialSnapshot,
    Loan,
    UserProgress,
)
from finance_tracker.domain.results import Celebration, FinancialHealth, UserLevel
from finance_tracker.domain.rules import (
    EMERGENCY_FUND_MONTHS,
    LEVEL_OVERFLOW_MULTIPLIER,
    LEVEL_THRESHOLDS,
)

logger = logging.getLogger(__name__)

WEEK_DAYS = 7
MONTH_DAYS = 30
TRACKING_WINDOW_DAYS = 7
WANTS_REDUCTION_TARGET = 0.8
INVESTMENT_SURPLUS_SHARE = 0.2
GOAL_CHALLENGE_MONTHS = 3
STREAK_CELEBRATION_DAYS = 7
EXCELLENT_HEALTH_SCORE = 80
GOAL_MILESTONES = (25, 50, 75, 100)


def _challenge_exists(existing: Sequence[Challenge], type_: str, category: str) -> bool:
    return any(
        c.type == type_ and c.category == category and c.is_active and not c.is_completed
        for c in existing
    )


def _recent_entry_count(snapshot: FinancialSnapshot, today: date) -> int:
    return sum(1 for e in snapshot.daily_entries if 0 <= (today - e.date).days <= TRACKING_WINDOW_DAYS)


def _total_wants(snapshot: FinancialSnapshot) -> float:
    return aggregates.total_monthly_expenses([e for e in snapshot.expenses if e.category == "want"])


def _emergency_goal_amount(goals: Sequence[FinancialGoal]) -> float:
    goal = next((g for g in goals if g.category == "emergency"), None)
    return goal.current_amount if goal else 0.0


def _smallest_loan(loans: Sequence[Loan]) -> Loan:
    # min() keeps the first of equal balances
    return min(loans, key=lambda loan: loan.current_balance)


def generate_challenges(
    snapshot: FinancialSnapshot,
    health: FinancialHealth,
    existing: Sequence[Challenge] = (),
    today: date | None = None,
) -> List[Challenge]:
    """
    Propose new challenges that fit the user's records.

    Requirements:
    - No records at all: no challenges
    - One challenge per (type, category); skipped while an active,
      incomplete one with the same pair exists
    - Ids derive from the kind, the tracked entity and the day, so
      generating twice on the same inputs gives the same challenges;
      an id already present in `existing` is never proposed again

    Challenge catalogue:
        daily/tracking      income > 0                    50 pts  easy
        weekly/savings      wants spending > 0            100 pts medium
        monthly/savings     emergency ratio < 1           200 pts hard
        monthly/debt        any loan (smallest balance)   300 pts hard
        monthly/investment  health good+, income > spend  150 pts medium
        monthly/goals       unfinished high-priority goal 120 pts medium
    """
    if today is None:
        today = date.today()
    if not snapshot.has_data():
        return []

    stamp = today.isoformat()
    week_deadline = today + timedelta(days=WEEK_DAYS)
    month_deadline = today + timedelta(days=MONTH_DAYS)

    income = aggregates.total_monthly_income(snapshot.incomes)
    expenses = aggregates.total_monthly_expenses(snapshot.expenses)
    wants = _total_wants(snapshot)

    challenges: List[Challenge] = []

    if income > 0 and not _challenge_exists(existing, "daily", "tracking"):
        challenges.append(
            Challenge(
                id=f"daily-track-{stamp}",
                title="Daily Expense Tracker",
                description="Log your daily expenses for 7 consecutive days",
                type="daily",
                category="tracking",
                target=TRACKING_WINDOW_DAYS,
                current=_recent_entry_count(snapshot, today),
                points=50,
                deadline=week_deadline,
                difficulty="easy",
            )
        )

    if wants > 0 and not _challenge_exists(existing, "weekly", "savings"):
        challenges.append(
            Challenge(
                id=f"weekly-reduce-wants-{stamp}",
                title="Wants Spending Challenge",
                description="Reduce wants spending by 20% this week",
                type="weekly",
                category="savings",
                target=wants * WANTS_REDUCTION_TARGET,
                current=wants,
                points=100,
                deadline=week_deadline,
                difficulty="medium",
            )
        )

    emergency_target = expenses * EMERGENCY_FUND_MONTHS
    if (
        health.emergency_fund_ratio < 1
        and emergency_target > 0
        and not _challenge_exists(existing, "monthly", "savings")
    ):
        challenges.append(
            Challenge(
                id=f"monthly-emergency-{stamp}",
                title="Emergency Fund Builder",
                description="Build emergency fund to cover 6 months of expenses",
                type="monthly",
                category="savings",
                target=emergency_target,
                current=_emergency_goal_amount(snapshot.goals),
                points=200,
                deadline=month_deadline,
                difficulty="hard",
            )
        )

    if snapshot.loans and not _challenge_exists(existing, "monthly", "debt"):
        loan = _smallest_loan(snapshot.loans)
        challenges.append(
            Challenge(
                id=f"debt-payoff-{loan.id}-{stamp}",
                title="Debt Destroyer",
                description=f"Pay off {loan.name} completely",
                type="monthly",
                category="debt",
                target=loan.current_balance,
                current=loan.principal - loan.current_balance,
                points=300,
                deadline=month_deadline,
                difficulty="hard",
                loan_id=loan.id,
            )
        )

    if (
        health.level in ("good", "excellent")
        and income > expenses
        and not _challenge_exists(existing, "monthly", "investment")
    ):
        challenges.append(
            Challenge(
                id=f"investment-starter-{stamp}",
                title="Investment Pioneer",
                description="Allocate 20% of surplus income to investments",
                type="monthly",
                category="investment",
                target=(income - expenses) * INVESTMENT_SURPLUS_SHARE,
                current=0.0,
                points=150,
                deadline=month_deadline,
                difficulty="medium",
            )
        )

    open_goals = [g for g in snapshot.goals if g.priority == "high" and g.current_amount < g.target_amount]
    if open_goals and not _challenge_exists(existing, "monthly", "goals"):
        goal = open_goals[0]
        step = (goal.target_amount - goal.current_amount) / GOAL_CHALLENGE_MONTHS
        challenges.append(
            Challenge(
                id=f"goal-achievement-{goal.id}-{stamp}",
                title="Goal Achiever",
                description=f"Make progress on {goal.name}",
                type="monthly",
                category="goals",
                target=goal.current_amount + step,
                current=goal.current_amount,
                points=120,
                deadline=month_deadline,
                difficulty="medium",
                goal_id=goal.id,
            )
        )

    taken = {c.id for c in existing}
    return [c for c in challenges if c.id not in taken]


def _find_loan(challenge: Challenge, loans: Sequence[Loan]) -> Optional[Loan]:
    if challenge.loan_id is not None:
        return next((loan for loan in loans if loan.id == challenge.loan_id), None)
    # Legacy challenges only carry the name in their description
    return next((loan for loan in loans if loan.name in challenge.description), None)


def _find_goal(challenge: Challenge, goals: Sequence[FinancialGoal]) -> Optional[FinancialGoal]:
    if challenge.goal_id is not None:
        return next((g for g in goals if g.id == challenge.goal_id), None)
    return next((g for g in goals if g.name in challenge.description), None)


def update_challenge_progress(
    challenge: Challenge,
    snapshot: FinancialSnapshot,
    today: date | None = None,
) -> float:
    """Recompute `current` for a challenge from fresh records; unknown kinds keep their value"""
    if today is None:
        today = date.today()

    if challenge.category == "tracking":
        return float(_recent_entry_count(snapshot, today))

    if challenge.category == "savings":
        if challenge.type == "weekly":
            return _total_wants(snapshot)
        return _emergency_goal_amount(snapshot.goals)

    if challenge.category == "debt":
        loan = _find_loan(challenge, snapshot.loans)
        if loan is not None:
            return loan.principal - loan.current_balance

    if challenge.category == "goals":
        goal = _find_goal(challenge, snapshot.goals)
        return goal.current_amount if goal else 0.0

    return challenge.current


def refresh_challenges(
    snapshot: FinancialSnapshot,
    health: FinancialHealth,
    existing: Sequence[Challenge],
    today: date | None = None,
) -> Tuple[List[Challenge], List[Challenge]]:
    """
    Bring existing active challenges up to date and propose new ones.

    Returns (updated existing challenges, newly generated challenges).
    Completed or inactive challenges are returned untouched.
    """
    if today is None:
        today = date.today()

    updated: List[Challenge] = []
    for challenge in existing:
        if challenge.is_active and not challenge.is_completed:
            challenge = replace(challenge, current=update_challenge_progress(challenge, snapshot, today))
        updated.append(challenge)

    created = generate_challenges(snapshot, health, updated, today)
    logger.debug("refreshed %s challenges, generated %s", len(updated), len(created))
    return updated, created


def calculate_user_level(total_points: int) -> UserLevel:
    """
    Level for a point total.

    Thresholds: 0, 100, 250, 500, 1000, 1500, 2500, 4000, 6000, 9000, 13000.
    Past the last threshold the level stays at 11 and the next step is
    1.5x the last threshold.
    """
    level = 1
    current_level_points = total_points
    next_level_points = LEVEL_THRESHOLDS[1]

    for i in range(1, len(LEVEL_THRESHOLDS)):
        if total_points >= LEVEL_THRESHOLDS[i]:
            level = i + 1
            current_level_points = total_points - LEVEL_THRESHOLDS[i]
            if i + 1 < len(LEVEL_THRESHOLDS):
                next_level_points = LEVEL_THRESHOLDS[i + 1] - LEVEL_THRESHOLDS[i]
            else:
                next_level_points = int(LEVEL_THRESHOLDS[i] * LEVEL_OVERFLOW_MULTIPLIER)
        else:
            next_level_points = LEVEL_THRESHOLDS[i] - LEVEL_THRESHOLDS[i - 1]
            break

    return UserLevel(level=level, current_level_points=current_level_points, next_level_points=next_level_points)


def complete_challenge(
    challenge: Challenge,
    progress: UserProgress,
    today: date | None = None,
) -> Tuple[Challenge, UserProgress]:
    """Mark a challenge done and award its points; completing twice awards nothing"""
    if today is None:
        today = date.today()
    if challenge.is_completed:
        return challenge, progress

    points = progress.total_points + challenge.points
    level = calculate_user_level(points)
    completed = replace(challenge, is_completed=True, current=challenge.target)
    updated = replace(
        progress,
        total_points=points,
        level=level.level,
        current_level_points=level.current_level_points,
        next_level_points=level.next_level_points,
        challenges_completed=progress.challenges_completed + 1,
        last_activity_date=today,
    )
    return completed, updated


def record_daily_activity(
    progress: UserProgress,
    entry_date: date,
    entry_dates: Iterable[date],
    today: date | None = None,
) -> UserProgress:
    """
    Update the tracking streak after a daily entry is logged.

    Only entries dated today count. The streak grows when yesterday also
    has an entry or when no streak is running; otherwise it is unchanged.
    """
    if today is None:
        today = date.today()
    if entry_date != today:
        return progress

    yesterday = today - timedelta(days=1)
    if yesterday not in set(entry_dates) and progress.streak != 0:
        return progress

    streak = progress.streak + 1
    return replace(
        progress,
        streak=streak,
        longest_streak=max(progress.longest_streak, streak),
        last_activity_date=today,
    )


def generate_celebrations(
    goals: Sequence[FinancialGoal],
    progress: Optional[UserProgress],
    health: FinancialHealth,
    seen: Iterable[str] = (),
) -> List[Celebration]:
    """Celebrations for goal milestones, level-ups, weekly streaks and excellent health"""
    acknowledged: Set[str] = set(seen)
    celebrations: List[Celebration] = []

    for goal in goals:
        reached = progress_percentage(goal)
        for milestone in GOAL_MILESTONES:
            celebration_id = f"goal-{goal.id}-{milestone}"
            if reached >= milestone and celebration_id not in acknowledged:
                celebrations.append(
                    Celebration(
                        id=celebration_id,
                        type="milestone",
                        title=f"{milestone}% Goal Achievement!",
                        message=f"You've reached {milestone}% of your {goal.name} goal!",
                        amount=goal.current_amount,
                    )
                )

    if progress is not None:
        if progress.level > 1 and f"level-{progress.level}" not in acknowledged:
            celebrations.append(
                Celebration(
                    id=f"level-{progress.level}",
                    type="level_up",
                    title=f"Level {progress.level} Achieved!",
                    message=f"You've reached Level {progress.level} in your financial journey!",
                )
            )
        if (
            progress.streak > 0
            and progress.streak % STREAK_CELEBRATION_DAYS == 0
            and f"streak-{progress.streak}" not in acknowledged
        ):
            celebrations.append(
                Celebration(
                    id=f"streak-{progress.streak}",
                    type="streak",
                    title=f"{progress.streak} Day Streak!",
                    message=f"Amazing! You've tracked your finances for {progress.streak} consecutive days!",
                )
            )

    if health.score >= EXCELLENT_HEALTH_SCORE and "excellent-health" not in acknowledged:
        celebrations.append(
            Celebration(
                id="excellent-health",
                type="milestone",
                title="Excellent Financial Health!",
                message=f"Your financial health score has reached {health.score}!",
            )
        )

    return celebrations

"""GET /v1/goals/progress and /v1/goals/forecast"""

import time
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import get_request_id, raise_http_error
from finance_tracker.api.v1.schemas import (
    GoalForecastSchema,
    GoalForecastsResponse,
    GoalProgressSchema,
    GoalsProgressResponse,
)
from finance_tracker.domain import aggregates
from finance_tracker.domain.goals import calculate_goal_progress, generate_goal_forecast
from finance_tracker.domain.health import calculate_financial_health
from finance_tracker.infrastructure.database.repositories import FinancialRecordRepository
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.observability.logging import log_derivation
from finance_tracker.infrastructure.observability.metrics import record_derivation

router = APIRouter()


@router.get("/goals/progress", response_model=GoalsProgressResponse)
def get_goals_progress(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    start_time = time.time()
    request_id = get_request_id(request)
    try:
        snapshot = FinancialRecordRepository(db).load_snapshot(user_id)
        progresses = [calculate_goal_progress(goal) for goal in snapshot.goals]
    except Exception as e:
        raise_http_error(e, db, request_id)

    record_derivation("goals")
    log_derivation(request_id, user_id, "goals", (time.time() - start_time) * 1000)

    return GoalsProgressResponse(
        user_id=user_id,
        goals=[GoalProgressSchema.model_validate(p) for p in progresses],
    )


@router.get("/goals/forecast", response_model=GoalForecastsResponse)
def get_goals_forecast(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """Projected completion, success probability and milestones at the current savings rate"""
    start_time = time.time()
    request_id = get_request_id(request)
    try:
        snapshot = FinancialRecordRepository(db).load_snapshot(user_id)
        income = aggregates.total_monthly_income(snapshot.incomes)
        expenses = aggregates.total_monthly_expenses(snapshot.expenses)
        savings_rate = calculate_financial_health(snapshot).savings_rate
        forecasts = [generate_goal_forecast(goal, income, expenses, savings_rate) for goal in snapshot.goals]
    except Exception as e:
        raise_http_error(e, db, request_id)

    record_derivation("goal_forecast")
    log_derivation(request_id, user_id, "goal_forecast", (time.time() - start_time) * 1000)

    return GoalForecastsResponse(
        user_id=user_id,
        savings_rate=savings_rate,
        forecasts=[GoalForecastSchema.model_validate(f) for f in forecasts],
    )

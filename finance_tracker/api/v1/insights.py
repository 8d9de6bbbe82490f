"""Health, dashboard, allocation, spending allowance and trend views under /v1"""

import time
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import get_request_id, raise_http_error
from finance_tracker.api.v1.schemas import (
    AutoAllocationResponse,
    DashboardResponse,
    EmergencyPreparednessSchema,
    FinancialHealthResponse,
    HealthImprovementStepSchema,
    HealthImprovementsResponse,
    SpendingAllowanceResponse,
    TrendComparisonSchema,
    TrendPointSchema,
    TrendsResponse,
)
from finance_tracker.config import settings
from finance_tracker.domain.allocation import calculate_auto_allocation
from finance_tracker.domain.allowance import calculate_spending_allowance
from finance_tracker.domain.dashboard import build_dashboard_summary
from finance_tracker.domain.health import (
    calculate_emergency_preparedness,
    calculate_financial_health,
    generate_health_improvement_steps,
)
from finance_tracker.domain.trends import assess_trend, build_trend, compare_trend_points
from finance_tracker.infrastructure.database.repositories import FinancialRecordRepository
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.observability.logging import log_derivation
from finance_tracker.infrastructure.observability.metrics import record_derivation, record_health

router = APIRouter()


def _finish(request_id: str, user_id: str, view: str, start_time: float, health_score: int | None = None) -> None:
    duration_ms = (time.time() - start_time) * 1000
    record_derivation(view)
    log_derivation(request_id, user_id, view, duration_ms, health_score)


@router.get("/financial-health", response_model=FinancialHealthResponse)
def get_financial_health(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """Health score (0-100), level, ratios and recommendations"""
    start_time = time.time()
    request_id = get_request_id(request)
    try:
        snapshot = FinancialRecordRepository(db).load_snapshot(user_id)
        health = calculate_financial_health(snapshot)
    except Exception as e:
        raise_http_error(e, db, request_id)

    record_health(health.score, health.level)
    _finish(request_id, user_id, "health", start_time, health.score)
    return FinancialHealthResponse.model_validate(health)


@router.get("/financial-health/improvements", response_model=HealthImprovementsResponse)
def get_health_improvements(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """Ranked actions that would raise the score, plus emergency preparedness"""
    start_time = time.time()
    request_id = get_request_id(request)
    try:
        snapshot = FinancialRecordRepository(db).load_snapshot(user_id)
        health = calculate_financial_health(snapshot)
        steps = generate_health_improvement_steps(health, snapshot)
        preparedness = calculate_emergency_preparedness(snapshot)
    except Exception as e:
        raise_http_error(e, db, request_id)

    _finish(request_id, user_id, "health_improvements", start_time, health.score)
    return HealthImprovementsResponse(
        user_id=user_id,
        score=health.score,
        level=health.level,
        steps=[HealthImprovementStepSchema.model_validate(s) for s in steps],
        preparedness=EmergencyPreparednessSchema.model_validate(preparedness),
    )


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """
    Overview bundle: net worth, totals, health, allowance, allocation,
    goal counts and upcoming bills/payments, all from one snapshot.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    try:
        repo = FinancialRecordRepository(db)
        snapshot = repo.load_snapshot(user_id)
        preferences = repo.load_preferences(user_id, settings.default_currency)
        summary = build_dashboard_summary(snapshot, preferences, upcoming_days=settings.upcoming_window_days)
    except Exception as e:
        raise_http_error(e, db, request_id)

    record_health(summary.health.score, summary.health.level)
    _finish(request_id, user_id, "dashboard", start_time, summary.health.score)
    return DashboardResponse.model_validate(summary)


@router.get("/allocation", response_model=AutoAllocationResponse)
def get_allocation(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """Monthly income split across debt, emergency, investments, needs and wants"""
    start_time = time.time()
    request_id = get_request_id(request)
    try:
        repo = FinancialRecordRepository(db)
        snapshot = repo.load_snapshot(user_id)
        preferences = repo.load_preferences(user_id, settings.default_currency)
        allocation = calculate_auto_allocation(snapshot, preferences)
    except Exception as e:
        raise_http_error(e, db, request_id)

    _finish(request_id, user_id, "allocation", start_time)
    return AutoAllocationResponse.model_validate(allocation)


@router.get("/spending-allowance", response_model=SpendingAllowanceResponse)
def get_spending_allowance(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """Advisory headroom in the monthly wants budget"""
    start_time = time.time()
    request_id = get_request_id(request)
    try:
        repo = FinancialRecordRepository(db)
        snapshot = repo.load_snapshot(user_id)
        preferences = repo.load_preferences(user_id, settings.default_currency)
        allowance = calculate_spending_allowance(snapshot, preferences)
    except Exception as e:
        raise_http_error(e, db, request_id)

    _finish(request_id, user_id, "spending_allowance", start_time)
    return SpendingAllowanceResponse.model_validate(allowance)


@router.get("/trends", response_model=TrendsResponse)
def get_trends(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    months: int = Query(6, ge=2, le=24, description="Number of monthly points"),
    db: Session = Depends(get_db),
):
    """Monthly trend points, last-month comparisons and an overall assessment"""
    start_time = time.time()
    request_id = get_request_id(request)
    try:
        snapshot = FinancialRecordRepository(db).load_snapshot(user_id)
        points = build_trend(snapshot, months)
        comparisons = compare_trend_points(points)
        assessment = assess_trend(points, comparisons)
    except Exception as e:
        raise_http_error(e, db, request_id)

    _finish(request_id, user_id, "trends", start_time)
    return TrendsResponse(
        user_id=user_id,
        status=assessment.status,
        message=assessment.message,
        points=[TrendPointSchema.model_validate(p) for p in points],
        comparisons=[TrendComparisonSchema.model_validate(c) for c in comparisons],
    )

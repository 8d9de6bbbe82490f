"""GET /v1/debt-plan and /v1/payment-suggestions"""

import time
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import get_request_id, raise_http_error
from finance_tracker.api.v1.schemas import (
    DebtPlanResponse,
    DebtRecommendationSchema,
    NextPaymentSchema,
    PaymentSuggestionSchema,
    PaymentSuggestionsResponse,
)
from finance_tracker.config import settings
from finance_tracker.domain.allocation import calculate_auto_allocation
from finance_tracker.domain.debt import (
    generate_debt_recommendations,
    generate_payment_suggestions,
    next_payment_recommendation,
    resolve_debt_strategy,
    suggest_optimal_debt_strategy,
    validate_debt_strategy,
)
from finance_tracker.infrastructure.database.repositories import FinancialRecordRepository
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.observability.logging import log_derivation
from finance_tracker.infrastructure.observability.metrics import record_derivation

router = APIRouter()


@router.get("/debt-plan", response_model=DebtPlanResponse)
def get_debt_plan(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    strategy: Optional[str] = Query(None, description="avalanche | snowball | hybrid"),
    db: Session = Depends(get_db),
):
    """
    Priority-ordered payoff plan.

    Account debts come first, then loans in strategy order. Without an
    explicit strategy the user's preference (or the suggested one when
    auto-suggest is on) is used. The extra payment on the top loan is the
    extra-debt share of this month's allocation.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    try:
        repo = FinancialRecordRepository(db)
        snapshot = repo.load_snapshot(user_id)
        preferences = repo.load_preferences(user_id, settings.default_currency)

        chosen = validate_debt_strategy(strategy) if strategy else resolve_debt_strategy(preferences, snapshot)
        allocation = calculate_auto_allocation(snapshot, preferences)
        extra_payment = allocation.breakdown.extra_debt_payment

        recommendations = generate_debt_recommendations(
            snapshot.loans, extra_payment, chosen, snapshot.bank_accounts
        )
        next_payment = next_payment_recommendation(snapshot, extra_payment, chosen)
        suggested = suggest_optimal_debt_strategy(snapshot)
    except Exception as e:
        raise_http_error(e, db, request_id)

    record_derivation("debt_plan")
    log_derivation(request_id, user_id, "debt_plan", (time.time() - start_time) * 1000)

    return DebtPlanResponse(
        user_id=user_id,
        strategy=chosen,
        suggested_strategy=suggested,
        extra_payment=extra_payment,
        recommendations=[DebtRecommendationSchema.model_validate(r) for r in recommendations],
        next_payment=NextPaymentSchema.model_validate(next_payment) if next_payment else None,
    )


@router.get("/payment-suggestions", response_model=PaymentSuggestionsResponse)
def get_payment_suggestions(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """Concrete payments to make now, most urgent first"""
    start_time = time.time()
    request_id = get_request_id(request)
    try:
        repo = FinancialRecordRepository(db)
        snapshot = repo.load_snapshot(user_id)
        preferences = repo.load_preferences(user_id, settings.default_currency)

        available = calculate_auto_allocation(snapshot, preferences).breakdown.available_for_allocation
        suggestions = generate_payment_suggestions(snapshot, available, preferences)
    except Exception as e:
        raise_http_error(e, db, request_id)

    record_derivation("payment_suggestions")
    log_derivation(request_id, user_id, "payment_suggestions", (time.time() - start_time) * 1000)

    return PaymentSuggestionsResponse(
        user_id=user_id,
        available_amount=available,
        suggestions=[PaymentSuggestionSchema.model_validate(s) for s in suggestions],
    )

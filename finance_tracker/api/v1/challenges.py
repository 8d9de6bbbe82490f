"""POST /v1/challenges/refresh and /v1/challenges/{challenge_id}/complete"""

import time
import logging
from datetime import date
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import get_request_id, raise_http_error
from finance_tracker.api.v1.schemas import (
    CelebrationSchema,
    ChallengeCompletionResponse,
    ChallengeSchema,
    ChallengesResponse,
    UserProgressSchema,
)
from finance_tracker.domain.gamification import complete_challenge, generate_celebrations, refresh_challenges
from finance_tracker.domain.health import calculate_financial_health
from finance_tracker.infrastructure.database.repositories import (
    ChallengeRepository,
    FinancialRecordRepository,
    ProgressRepository,
)
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.observability.logging import log_challenges_generated
from finance_tracker.infrastructure.observability.metrics import (
    record_challenge_completed,
    record_challenges_generated,
)

router = APIRouter()


@router.post("/challenges/refresh", response_model=ChallengesResponse)
def refresh_user_challenges(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """
    Recompute progress on active challenges and add new ones.

    Flow:
    1. Load records and current challenges
    2. Score health (drives the emergency/investment challenges)
    3. Update `current` on active challenges, generate missing kinds
    4. Persist both sets in one transaction
    """
    request_id = get_request_id(request)
    today = date.today()
    try:
        snapshot = FinancialRecordRepository(db).load_snapshot(user_id)
        challenge_repo = ChallengeRepository(db)
        existing = challenge_repo.list_for_user(user_id)

        health = calculate_financial_health(snapshot, today)
        updated, generated = refresh_challenges(snapshot, health, existing, today)

        challenge_repo.save_all(user_id, updated + generated)
        db.commit()
    except Exception as e:
        raise_http_error(e, db, request_id)

    categories = [c.category for c in generated]
    record_challenges_generated(categories)
    log_challenges_generated(request_id, user_id, categories, len(updated))

    return ChallengesResponse(
        user_id=user_id,
        challenges=[ChallengeSchema.model_validate(c) for c in updated + generated],
        generated=[ChallengeSchema.model_validate(c) for c in generated],
    )


@router.post("/challenges/{challenge_id}/complete", response_model=ChallengeCompletionResponse)
def complete_user_challenge(
    challenge_id: str,
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """Mark a challenge complete, award its points and report any celebrations"""
    start_time = time.time()
    request_id = get_request_id(request)
    today = date.today()
    try:
        challenge_repo = ChallengeRepository(db)
        progress_repo = ProgressRepository(db)

        challenge = challenge_repo.get(user_id, challenge_id)
        already_completed = challenge.is_completed
        challenge, progress = complete_challenge(challenge, progress_repo.get(user_id), today)

        challenge_repo.save_all(user_id, [challenge])
        progress_repo.save(user_id, progress)
        db.commit()

        snapshot = FinancialRecordRepository(db).load_snapshot(user_id)
        celebrations = generate_celebrations(snapshot.goals, progress, calculate_financial_health(snapshot, today))
    except Exception as e:
        raise_http_error(e, db, request_id)

    if not already_completed:
        record_challenge_completed(challenge.category)
    logging.info(
        "Challenge completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "challenge_complete",
            "challenge_id": challenge_id,
            "total_points": progress.total_points,
            "level": progress.level,
            "duration_ms": (time.time() - start_time) * 1000,
        },
    )

    return ChallengeCompletionResponse(
        user_id=user_id,
        challenge=ChallengeSchema.model_validate(challenge),
        progress=UserProgressSchema.model_validate(progress),
        celebrations=[CelebrationSchema.model_validate(c) for c in celebrations],
    )

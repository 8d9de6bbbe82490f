"""Dependency injection and error translation for FastAPI endpoints"""

import logging
from typing import NoReturn
from fastapi import HTTPException, Request
from sqlalchemy.orm import Session
from finance_tracker.domain.exceptions import InvalidAllocationError, RecordNotFoundError, UnknownStrategyError


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def raise_http_error(exc: Exception, db: Session, request_id: str) -> NoReturn:
    """Roll back the session and re-raise `exc` as the matching HTTP error"""
    db.rollback()

    if isinstance(exc, HTTPException):
        raise exc
    if isinstance(exc, (UnknownStrategyError, InvalidAllocationError)):
        logging.warning(f"Invalid configuration: {exc}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, RecordNotFoundError):
        logging.warning(f"Record not found: {exc}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(exc))

    logging.error(f"Unexpected error: {exc}", extra={"request_id": request_id})
    raise HTTPException(status_code=500, detail="Internal server error")

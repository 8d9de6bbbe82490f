"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Sequence
from pythonjsonlogger import jsonlogger
from finance_tracker.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_derivation(
    request_id: str,
    user_id: str,
    view: str,
    duration_ms: float,
    health_score: int | None = None,
) -> None:
    """Log one derived view served to a user"""
    logging.info(
        "Derivation completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "derivation_complete",
            "view": view,
            "health_score": health_score,
            "duration_ms": duration_ms,
        },
    )


def log_challenges_generated(request_id: str, user_id: str, categories: Sequence[str], refreshed: int) -> None:
    """Log the outcome of a challenge refresh"""
    logging.info(
        "Challenges refreshed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "challenges_refreshed",
            "generated": len(categories),
            "categories": list(categories),
            "refreshed": refreshed,
        },
    )

"""Prometheus metrics for derivation volume, health scores and gamification"""

from typing import Sequence
from prometheus_client import Counter, Histogram

# Derivation metrics
derivation_counter = Counter(
    "finance_derivations_total",
    "Derived views served",
    ["view"],  # health | dashboard | allocation | debt_plan | ...
)

health_score_histogram = Histogram(
    "finance_health_score",
    "Distribution of computed financial health scores",
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
)

health_level_counter = Counter(
    "finance_health_level_total",
    "Health scores by level",
    ["level"],  # poor | fair | good | excellent
)

# Gamification metrics
challenges_generated_counter = Counter(
    "finance_challenges_generated_total",
    "Challenges generated",
    ["category"],
)

challenge_completion_counter = Counter(
    "finance_challenge_completions_total",
    "Challenges completed",
    ["category"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_derivation(view: str) -> None:
    derivation_counter.labels(view=view).inc()


def record_health(score: int, level: str) -> None:
    """Record a computed health score and its level"""
    health_score_histogram.observe(score)
    health_level_counter.labels(level=level).inc()


def record_challenges_generated(categories: Sequence[str]) -> None:
    for category in categories:
        challenges_generated_counter.labels(category=category).inc()


def record_challenge_completed(category: str) -> None:
    challenge_completion_counter.labels(category=category).inc()

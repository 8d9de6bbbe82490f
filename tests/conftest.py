"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date, timedelta
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finance_tracker.api.main import create_app
from finance_tracker.domain.models import (
    BankAccount,
    Expense,
    FinancialGoal,
    FinancialSnapshot,
    Income,
    Loan,
    UserPreferences,
)
from finance_tracker.domain.results import FinancialHealth
from finance_tracker.infrastructure.database.models import Base
from finance_tracker.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def today() -> date:
    """Fixed reference day so window-based derivations are deterministic"""
    return date(2026, 3, 15)


@pytest.fixture
def preferences() -> UserPreferences:
    return UserPreferences()


@pytest.fixture
def salaried_snapshot(today: date) -> FinancialSnapshot:
    """Single salary, a need and a want, modest savings, no debt"""
    return FinancialSnapshot(
        bank_accounts=(
            BankAccount(id="chk", name="Everyday", type="checking", balance=2000),
            BankAccount(id="sav", name="Rainy Day", type="savings", balance=3000),
        ),
        incomes=(Income(id="inc1", source="Salary", amount=5000, frequency="monthly"),),
        expenses=(
            Expense(id="rent", name="Rent", amount=1500, frequency="monthly", category="need"),
            Expense(id="dining", name="Dining Out", amount=500, frequency="monthly", category="want"),
        ),
        goals=(
            FinancialGoal(
                id="g-emergency",
                name="Emergency Fund",
                target_amount=12000,
                current_amount=3000,
                target_date=today + timedelta(days=180),
                category="emergency",
                priority="high",
                created_at=today - timedelta(days=60),
            ),
        ),
    )


@pytest.fixture
def indebted_snapshot(today: date) -> FinancialSnapshot:
    """Two loans, an overdrawn account and tight cash flow"""
    return FinancialSnapshot(
        bank_accounts=(
            BankAccount(
                id="chk",
                name="Current",
                type="checking",
                balance=-200,
                has_overdraft=True,
                overdraft_limit=1000,
                overdraft_used=100,
            ),
            BankAccount(id="sav", name="Savings", type="savings", balance=400),
        ),
        incomes=(Income(id="inc1", source="Salary", amount=3000, frequency="monthly"),),
        expenses=(
            Expense(id="rent", name="Rent", amount=1800, frequency="monthly", category="need"),
            Expense(id="tv", name="Streaming", amount=50, frequency="monthly", category="want"),
        ),
        loans=(
            Loan(
                id="A",
                name="Car Loan",
                principal=12000,
                current_balance=10000,
                interest_rate=24,
                minimum_payment=300,
            ),
            Loan(
                id="B",
                name="Phone Loan",
                principal=800,
                current_balance=500,
                interest_rate=5,
                minimum_payment=50,
            ),
        ),
    )


def make_health(level: str = "good", score: int = 70, **overrides) -> FinancialHealth:
    """FinancialHealth with neutral ratios, for engines that only read a few fields"""
    values = dict(
        score=score,
        level=level,
        debt_to_income_ratio=0.0,
        emergency_fund_ratio=1.0,
        savings_rate=20.0,
        net_worth=0.0,
        business_contribution=0.0,
        recommendations=[],
        suggested_strategy="balanced",
    )
    values.update(overrides)
    return FinancialHealth(**values)


@pytest.fixture
def health_factory():
    return make_health

"""Integration tests for API endpoints"""

import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from finance_tracker.infrastructure.database.models import (
    BankAccountRecord,
    BillRecord,
    ExpenseRecord,
    FinancialGoalRecord,
    IncomeRecord,
    LoanRecord,
    UserPreferencesRecord,
)

USER = "user_alice"


@pytest.fixture
def seeded_user(db: Session) -> str:
    """A user with salary, rent, an overdrawn account, two loans, a goal and a bill"""
    today = date.today()
    db.add_all(
        [
            IncomeRecord(id="inc1", user_id=USER, source="Salary", amount=3000, frequency="monthly"),
            ExpenseRecord(id="rent", user_id=USER, name="Rent", amount=1800, frequency="monthly", category="need"),
            ExpenseRecord(id="tv", user_id=USER, name="Streaming", amount=50, frequency="monthly", category="want"),
            BankAccountRecord(
                id="chk",
                user_id=USER,
                name="Current",
                type="checking",
                balance=-200,
                has_overdraft=True,
                overdraft_limit=1000,
                overdraft_used=100,
            ),
            BankAccountRecord(id="sav", user_id=USER, name="Savings", type="savings", balance=400),
            LoanRecord(
                id="A",
                user_id=USER,
                name="Car Loan",
                principal=12000,
                current_balance=10000,
                interest_rate=24,
                minimum_payment=300,
            ),
            LoanRecord(
                id="B",
                user_id=USER,
                name="Phone Loan",
                principal=800,
                current_balance=500,
                interest_rate=5,
                minimum_payment=50,
            ),
            FinancialGoalRecord(
                id="goal1",
                user_id=USER,
                name="Emergency Fund",
                target_amount=6000,
                current_amount=1500,
                target_date=today + timedelta(days=180),
                category="emergency",
                priority="high",
                created_on=today - timedelta(days=30),
            ),
            BillRecord(id="power", user_id=USER, name="Power", amount=80, due_date=today + timedelta(days=2)),
        ]
    )
    db.commit()
    return USER


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient, seeded_user: str):
    """Test Prometheus metrics endpoint exposes derivation metrics"""
    client.get("/v1/financial-health", params={"user_id": seeded_user})

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "finance_derivations_total" in response.text


def test_request_id_header(client: TestClient):
    """Test request IDs are echoed back"""
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_financial_health(client: TestClient, seeded_user: str):
    """Test GET /v1/financial-health scores the stored records"""
    response = client.get("/v1/financial-health", params={"user_id": seeded_user})

    assert response.status_code == 200
    data = response.json()
    assert 0 < data["score"] <= 100
    assert data["level"] in ("poor", "fair", "good", "excellent")
    assert data["net_worth"] < 0


def test_unknown_user_scores_zero(client: TestClient):
    """Test a user without records gets an empty, zero-score profile"""
    response = client.get("/v1/financial-health", params={"user_id": "nobody"})

    assert response.status_code == 200
    assert response.json()["score"] == 0


def test_missing_user_id_rejected(client: TestClient):
    """Test user_id is required"""
    response = client.get("/v1/financial-health")
    assert response.status_code == 422


def test_dashboard_matches_health(client: TestClient, seeded_user: str):
    """Test dashboard and health endpoints agree on net worth"""
    health = client.get("/v1/financial-health", params={"user_id": seeded_user}).json()
    dashboard = client.get("/v1/dashboard", params={"user_id": seeded_user}).json()

    assert dashboard["net_worth"] == pytest.approx(health["net_worth"])
    assert dashboard["health"]["score"] == health["score"]
    assert [b["id"] for b in dashboard["upcoming_bills"]] == ["power"]


def test_allocation_conserves_income(client: TestClient, seeded_user: str):
    """Test GET /v1/allocation balances to total income"""
    response = client.get("/v1/allocation", params={"user_id": seeded_user})

    assert response.status_code == 200
    data = response.json()
    breakdown = data["breakdown"]
    buckets = data["debt_payment"] + data["emergency_fund"] + data["investments"] + data["wants"] + data["needs"]
    assert buckets + breakdown["unallocated"] - breakdown["shortfall"] == pytest.approx(breakdown["total_income"])


def test_allocation_invalid_stored_strategy(client: TestClient, db: Session, seeded_user: str):
    """Test a bad stored preference maps to 422"""
    db.add(UserPreferencesRecord(user_id=seeded_user, strategy="yolo"))
    db.commit()

    response = client.get("/v1/allocation", params={"user_id": seeded_user})

    assert response.status_code == 422


@pytest.mark.parametrize("strategy,first_loan", [("avalanche", "A"), ("snowball", "B")])
def test_debt_plan(client: TestClient, seeded_user: str, strategy: str, first_loan: str):
    """Test GET /v1/debt-plan puts account debt first, then loans by strategy"""
    response = client.get("/v1/debt-plan", params={"user_id": seeded_user, "strategy": strategy})

    assert response.status_code == 200
    data = response.json()
    assert data["strategy"] == strategy
    kinds = [r["kind"] for r in data["recommendations"]]
    assert kinds == ["account", "loan", "loan"]
    assert data["recommendations"][0]["debt_id"] == "chk"
    assert data["recommendations"][1]["debt_id"] == first_loan
    assert data["next_payment"]["target_id"] == "chk"


def test_debt_plan_unknown_strategy(client: TestClient, seeded_user: str):
    """Test an unknown strategy is rejected with 422"""
    response = client.get("/v1/debt-plan", params={"user_id": seeded_user, "strategy": "random"})
    assert response.status_code == 422


def test_payment_suggestions(client: TestClient, seeded_user: str):
    """Test GET /v1/payment-suggestions leads with the critical account debt"""
    response = client.get("/v1/payment-suggestions", params={"user_id": seeded_user})

    assert response.status_code == 200
    suggestions = response.json()["suggestions"]
    assert suggestions[0]["urgency"] == "critical"
    assert "bill-power" in [s["id"] for s in suggestions]


def test_goals_progress(client: TestClient, seeded_user: str):
    """Test GET /v1/goals/progress reports each goal"""
    response = client.get("/v1/goals/progress", params={"user_id": seeded_user})

    assert response.status_code == 200
    goals = response.json()["goals"]
    assert [g["goal_id"] for g in goals] == ["goal1"]
    assert goals[0]["progress_percentage"] == pytest.approx(25.0)


def test_spending_allowance(client: TestClient, seeded_user: str):
    """Test GET /v1/spending-allowance"""
    response = client.get("/v1/spending-allowance", params={"user_id": seeded_user})

    assert response.status_code == 200
    data = response.json()
    assert data["allowed_wants_spending"] == pytest.approx(900.0)
    assert data["remaining_wants_allowance"] == pytest.approx(850.0)
    assert data["can_spend"] is True


def test_trends(client: TestClient, seeded_user: str):
    """Test GET /v1/trends returns points and comparisons"""
    response = client.get("/v1/trends", params={"user_id": seeded_user, "months": 3})

    assert response.status_code == 200
    data = response.json()
    assert len(data["points"]) == 3
    assert len(data["comparisons"]) == 6
    assert data["status"] in ("improving", "stable", "mixed", "declining", "poor")


def test_refresh_challenges_is_idempotent(client: TestClient, seeded_user: str):
    """Test refreshing twice does not duplicate challenges"""
    first = client.post("/v1/challenges/refresh", params={"user_id": seeded_user})
    second = client.post("/v1/challenges/refresh", params={"user_id": seeded_user})

    assert first.status_code == 200
    assert second.status_code == 200
    assert len(first.json()["generated"]) > 0
    assert second.json()["generated"] == []
    assert len(second.json()["challenges"]) == len(first.json()["challenges"])

    debt = next(c for c in first.json()["generated"] if c["category"] == "debt")
    assert debt["loan_id"] == "B"


def test_complete_challenge(client: TestClient, seeded_user: str):
    """Test completing a challenge awards points once"""
    generated = client.post("/v1/challenges/refresh", params={"user_id": seeded_user}).json()["generated"]
    debt = next(c for c in generated if c["category"] == "debt")

    response = client.post(f"/v1/challenges/{debt['id']}/complete", params={"user_id": seeded_user})

    assert response.status_code == 200
    data = response.json()
    assert data["challenge"]["is_completed"] is True
    assert data["progress"]["total_points"] == 300
    assert data["progress"]["level"] == 3

    again = client.post(f"/v1/challenges/{debt['id']}/complete", params={"user_id": seeded_user})
    assert again.json()["progress"]["total_points"] == 300


def test_complete_unknown_challenge(client: TestClient, seeded_user: str):
    """Test completing a missing challenge returns 404"""
    response = client.post("/v1/challenges/missing/complete", params={"user_id": seeded_user})
    assert response.status_code == 404


def test_challenges_are_scoped_per_user(client: TestClient, db: Session):
    """Test two users refreshing on the same day each keep their own challenges"""
    db.add_all(
        [
            IncomeRecord(id="alice-pay", user_id="alice", source="Salary", amount=4000, frequency="monthly"),
            IncomeRecord(id="bob-pay", user_id="bob", source="Salary", amount=2500, frequency="monthly"),
        ]
    )
    db.commit()

    alice = client.post("/v1/challenges/refresh", params={"user_id": "alice"}).json()
    bob = client.post("/v1/challenges/refresh", params={"user_id": "bob"}).json()
    bob_again = client.post("/v1/challenges/refresh", params={"user_id": "bob"}).json()

    assert len(bob["generated"]) > 0
    assert sorted(c["id"] for c in bob["generated"]) == sorted(c["id"] for c in alice["generated"])
    assert bob_again["generated"] == []
    assert len(bob_again["challenges"]) == len(bob["generated"])

    alice_after = client.post("/v1/challenges/refresh", params={"user_id": "alice"}).json()
    assert alice_after["generated"] == []
    assert len(alice_after["challenges"]) == len(alice["generated"])

    daily = next(c for c in bob["generated"] if c["type"] == "daily")
    completed = client.post(f"/v1/challenges/{daily['id']}/complete", params={"user_id": "bob"})
    assert completed.status_code == 200

    untouched = client.post("/v1/challenges/refresh", params={"user_id": "alice"}).json()
    alice_daily = next(c for c in untouched["challenges"] if c["id"] == daily["id"])
    assert alice_daily["is_completed"] is False


def test_goals_forecast(client: TestClient, seeded_user: str):
    """Test GET /v1/goals/forecast projects each goal at the current savings rate"""
    response = client.get("/v1/goals/forecast", params={"user_id": seeded_user})

    assert response.status_code == 200
    data = response.json()
    # (3000 - 1850 - 380) / 3000
    assert data["savings_rate"] == pytest.approx(25.666, abs=0.01)
    forecast = data["forecasts"][0]
    assert forecast["goal_id"] == "goal1"
    assert [m["percentage"] for m in forecast["milestones"]] == [25, 50, 75, 100]
    assert forecast["milestones"][0]["achieved"] is True
    assert 20 <= forecast["probability_of_success"] <= 100


def test_health_improvements(client: TestClient, seeded_user: str):
    """Test GET /v1/financial-health/improvements agrees with the health score"""
    health = client.get("/v1/financial-health", params={"user_id": seeded_user}).json()

    response = client.get("/v1/financial-health/improvements", params={"user_id": seeded_user})

    assert response.status_code == 200
    data = response.json()
    assert data["score"] == health["score"]
    assert len(data["steps"]) > 0
    assert data["preparedness"]["level"] in ("unprepared", "basic", "prepared", "well-prepared")

"""Unit tests for aggregate calculators"""

import pytest
from datetime import timedelta
from finance_tracker.domain import aggregates
from finance_tracker.domain.models import (
    BankAccount,
    Bill,
    BusinessEntry,
    DailyEntry,
    ExpectedPayment,
    FinancialGoal,
    Loan,
)


def _loan(id_="L1", balance=1000.0, rate=10.0, minimum=50.0) -> Loan:
    return Loan(
        id=id_,
        name=f"Loan {id_}",
        principal=balance,
        current_balance=balance,
        interest_rate=rate,
        minimum_payment=minimum,
    )


def test_total_debt_includes_account_debt():
    """Test loans plus negative balance plus overdraft used"""
    accounts = [
        BankAccount(id="a", name="A", type="checking", balance=-200, has_overdraft=True, overdraft_used=100),
        BankAccount(id="b", name="B", type="checking", balance=-999, is_active=False),
    ]

    assert aggregates.total_debt([_loan()], accounts) == pytest.approx(1300.0)


def test_overdraft_ignored_without_flag():
    """Test overdraft_used only counts when the overdraft is enabled"""
    account = BankAccount(id="a", name="A", type="checking", balance=50, has_overdraft=False, overdraft_used=300)

    assert aggregates.account_debt(account) == 0.0
    assert aggregates.accounts_with_debt([account]) == []


def test_minimum_payments_floor_applies_to_negative_balance_only():
    """Test 5% with floor 25 on negative balance, plain 5% on overdraft"""
    account = BankAccount(id="a", name="A", type="checking", balance=-200, has_overdraft=True, overdraft_used=100)

    # loan 50 + max(10, 25) + 5
    assert aggregates.minimum_payments([_loan(minimum=50)], [account]) == pytest.approx(80.0)


def test_emergency_funds_only_active_positive_savings():
    """Test only positive balances in active savings accounts count"""
    accounts = [
        BankAccount(id="s1", name="S1", type="savings", balance=1000),
        BankAccount(id="s2", name="S2", type="savings", balance=-50),
        BankAccount(id="s3", name="S3", type="savings", balance=700, is_active=False),
        BankAccount(id="c1", name="C1", type="checking", balance=5000),
    ]

    assert aggregates.emergency_funds(accounts) == pytest.approx(1000.0)


def test_net_worth_formula(today):
    """Test assets minus liabilities across every record type"""
    accounts = [
        BankAccount(id="chk", name="Checking", type="checking", balance=5000),
        BankAccount(id="sav", name="Savings", type="savings", balance=1000),
        BankAccount(id="od", name="Overdrawn", type="checking", balance=-300, has_overdraft=True, overdraft_used=200),
        BankAccount(id="old", name="Closed", type="checking", balance=9999, is_active=False),
    ]
    goals = [
        FinancialGoal("g1", "Index Fund", 1000, 700, today, "investment", "medium"),
        FinancialGoal("g2", "Cushion", 1000, 300, today, "emergency", "high"),
        FinancialGoal("g3", "Trip", 5000, 999, today, "vacation", "low"),
    ]
    payments = [
        ExpectedPayment("p1", "income", "Invoice", 400, today),
        ExpectedPayment("p2", "income", "Settled invoice", 999, today, is_paid=True),
        ExpectedPayment("p3", "expense", "Owed to friend", 150, today),
    ]

    # assets: 5000 + 1000 + 700 + 300 + 400 = 7400
    # liabilities: 2000 + (300 + 200) + 150 = 2650
    worth = aggregates.net_worth(accounts, [_loan(balance=2000)], goals, payments)

    assert worth == pytest.approx(4750.0)


def test_net_worth_empty_is_zero():
    """Test no records means zero net worth"""
    assert aggregates.net_worth() == 0.0


def test_business_contribution_trailing_window(today):
    """Test only the last 30 days of profit count"""
    entries = [
        BusinessEntry("b1", today - timedelta(days=1), sales=500, stock_value=0, profit=100),
        BusinessEntry("b2", today - timedelta(days=29), sales=900, stock_value=0, profit=200),
        BusinessEntry("b3", today - timedelta(days=40), sales=2000, stock_value=0, profit=500),
    ]

    assert aggregates.business_contribution(entries, today) == pytest.approx(300.0)


def test_daily_average_divides_by_window(today):
    """Test sparse history is averaged over the whole window"""
    entries = [
        DailyEntry("d1", today, income=200, expenses=60),
        DailyEntry("d2", today - timedelta(days=3), income=100, expenses=30),
        DailyEntry("d3", today - timedelta(days=90), income=10000, expenses=10000),
    ]

    income, expenses = aggregates.daily_average(entries, 30, today)

    assert income == pytest.approx(10.0)
    assert expenses == pytest.approx(3.0)


def test_daily_average_zero_days():
    """Test an empty window averages to zero instead of dividing by zero"""
    assert aggregates.daily_average([], 0) == (0.0, 0.0)


def test_upcoming_and_overdue_windows(today):
    """Test upcoming items fall within the horizon and overdue ones are unpaid past items"""
    bills = [
        Bill("soon", "Power", 80, today + timedelta(days=3)),
        Bill("paid", "Water", 30, today + timedelta(days=2), is_paid=True),
        Bill("later", "Insurance", 200, today + timedelta(days=10)),
        Bill("late", "Internet", 60, today - timedelta(days=1)),
    ]
    payments = [
        ExpectedPayment("p1", "income", "Client", 500, today + timedelta(days=5)),
        ExpectedPayment("p2", "expense", "Loan to Sam", 100, today - timedelta(days=2)),
        ExpectedPayment("p3", "income", "Paid client", 500, today - timedelta(days=2), is_paid=True),
    ]

    assert [b.id for b in aggregates.upcoming_bills(bills, 7, today)] == ["soon"]
    assert [p.id for p in aggregates.upcoming_expected_payments(payments, 7, today)] == ["p1"]
    assert [p.id for p in aggregates.overdue_expected_payments(payments, today)] == ["p2"]


def test_interest_per_month():
    """Test monthly interest from a monthly percentage rate"""
    assert aggregates.interest_per_month(_loan(balance=2000, rate=1.5)) == pytest.approx(30.0)

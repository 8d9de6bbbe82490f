"""Aggregate calculators - pure reducers over a user's record collections"""

from datetime import date, timedelta
from typing import List, Sequence, Tuple
from finance_tracker.domain.models import (
    BankAccount,
    Bill,
    BusinessEntry,
    DailyEntry,
    ExpectedPayment,
    Expense,
    FinancialGoal,
    Income,
    Loan,
)
from finance_tracker.domain.rules import (
    ACCOUNT_MIN_PAYMENT_FLOOR,
    ACCOUNT_MIN_PAYMENT_RATE,
    BUSINESS_WINDOW_DAYS,
    OVERDRAFT_MIN_PAYMENT_RATE,
)
from finance_tracker.utils.date_utils import in_window, trailing_window

NET_WORTH_GOAL_CATEGORIES = ("investment", "emergency")


def total_monthly_income(incomes: Sequence[Income]) -> float:
    return sum((income.monthly_amount for income in incomes), 0.0)


def total_monthly_expenses(expenses: Sequence[Expense]) -> float:
    return sum((expense.monthly_amount for expense in expenses), 0.0)


def overdraft_in_use(account: BankAccount) -> float:
    """Overdraft drawn on an account; missing or disabled overdraft reads as zero"""
    if account.has_overdraft and account.overdraft_used:
        return max(0.0, account.overdraft_used)
    return 0.0


def account_debt(account: BankAccount) -> float:
    """Negative balance plus overdraft used, each counted once"""
    return max(0.0, -account.balance) + overdraft_in_use(account)


def accounts_with_debt(accounts: Sequence[BankAccount]) -> List[BankAccount]:
    """Active accounts carrying a negative balance or a used overdraft, input order kept"""
    return [a for a in accounts if a.is_active and account_debt(a) > 0]


def total_debt(loans: Sequence[Loan], accounts: Sequence[BankAccount] = ()) -> float:
    """
    Total outstanding debt.

    Sum of loan balances plus, for active accounts only, the negative
    balance and overdraft used. Inactive accounts never contribute.
    """
    loan_debt = sum((loan.current_balance for loan in loans), 0.0)
    acct_debt = sum((account_debt(a) for a in accounts if a.is_active), 0.0)
    return loan_debt + acct_debt


def minimum_payments(loans: Sequence[Loan], accounts: Sequence[BankAccount] = ()) -> float:
    """
    Required monthly debt service.

    Requirements:
    - Loans contribute their minimum payment
    - Negative balance: 5% of the balance with a floor of 25
    - Overdraft used: 5%, no floor
    """
    loan_payments = sum((loan.minimum_payment for loan in loans), 0.0)

    account_payments = 0.0
    for account in accounts:
        if not account.is_active:
            continue
        if account.balance < 0:
            account_payments += max(abs(account.balance) * ACCOUNT_MIN_PAYMENT_RATE, ACCOUNT_MIN_PAYMENT_FLOOR)
        overdraft = overdraft_in_use(account)
        if overdraft > 0:
            account_payments += overdraft * OVERDRAFT_MIN_PAYMENT_RATE

    return loan_payments + account_payments


def interest_per_month(loan: Loan) -> float:
    return loan.current_balance * loan.interest_rate / 100


def emergency_funds(accounts: Sequence[BankAccount]) -> float:
    """Positive balances held in active savings accounts"""
    return sum((max(0.0, a.balance) for a in accounts if a.is_active and a.type == "savings"), 0.0)


def net_worth(
    accounts: Sequence[BankAccount] = (),
    loans: Sequence[Loan] = (),
    goals: Sequence[FinancialGoal] = (),
    expected_payments: Sequence[ExpectedPayment] = (),
) -> float:
    """
    Canonical net worth. Every figure labelled "net worth" must come from here.

    Assets:
    - positive balances of active accounts
    - saved amounts of investment and emergency goals
    - unpaid expected income
    Liabilities:
    - loan balances
    - negative balance + overdraft used of active accounts
    - unpaid expected expenses
    """
    active = [a for a in accounts if a.is_active]

    account_assets = sum((max(0.0, a.balance) for a in active), 0.0)
    goal_assets = sum((g.current_amount for g in goals if g.category in NET_WORTH_GOAL_CATEGORIES), 0.0)
    expected_income = sum((p.amount for p in expected_payments if p.type == "income" and not p.is_paid), 0.0)

    loan_liabilities = sum((loan.current_balance for loan in loans), 0.0)
    account_liabilities = sum((account_debt(a) for a in active), 0.0)
    expected_expenses = sum((p.amount for p in expected_payments if p.type == "expense" and not p.is_paid), 0.0)

    assets = account_assets + goal_assets + expected_income
    liabilities = loan_liabilities + account_liabilities + expected_expenses
    return assets - liabilities


def business_contribution(entries: Sequence[BusinessEntry], today: date | None = None) -> float:
    """
    Monthly business profit from the trailing 30 days.

    Daily average over the window scaled back to a 30-day month, which
    equals the window's profit sum up to float rounding.
    """
    if today is None:
        today = date.today()
    start, end = trailing_window(today, BUSINESS_WINDOW_DAYS)

    total_profit = sum((e.profit for e in entries if in_window(e.date, start, end)), 0.0)
    return total_profit / BUSINESS_WINDOW_DAYS * BUSINESS_WINDOW_DAYS


def daily_average(
    entries: Sequence[DailyEntry],
    days: int = 30,
    today: date | None = None,
) -> Tuple[float, float]:
    """
    Average daily (income, expenses) over the trailing `days` window.

    The divisor is always `days`, not the number of entries found, so sparse
    history pulls the average toward zero.
    """
    if days <= 0:
        return 0.0, 0.0
    if today is None:
        today = date.today()
    start, end = trailing_window(today, days)

    recent = [e for e in entries if in_window(e.date, start, end)]
    income = sum((e.income for e in recent), 0.0)
    expenses = sum((e.expenses for e in recent), 0.0)
    return income / days, expenses / days


def upcoming_bills(bills: Sequence[Bill], days: int = 7, today: date | None = None) -> List[Bill]:
    """Unpaid bills due between today and `days` ahead"""
    if today is None:
        today = date.today()
    horizon = today + timedelta(days=days)
    return [b for b in bills if not b.is_paid and today <= b.due_date <= horizon]


def upcoming_expected_payments(
    payments: Sequence[ExpectedPayment],
    days: int = 7,
    today: date | None = None,
) -> List[ExpectedPayment]:
    if today is None:
        today = date.today()
    horizon = today + timedelta(days=days)
    return [p for p in payments if not p.is_paid and today <= p.expected_date <= horizon]


def overdue_expected_payments(payments: Sequence[ExpectedPayment], today: date | None = None) -> List[ExpectedPayment]:
    if today is None:
        today = date.today()
    return [p for p in payments if not p.is_paid and p.expected_date < today]

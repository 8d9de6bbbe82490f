"""Debt strategy engine - payoff ordering, projections and payment suggestions"""

import logging
import math
from datetime import date
from typing import Callable, List, Optional, Sequence
from finance_tracker.domain import aggregates
from finance_tracker.domain.exceptions import UnknownStrategyError
from finance_tracker.domain.goals import calculate_goal_progress
from finance_tracker.domain.models import (
    DEBT_STRATEGIES,
    BankAccount,
    FinancialSnapshot,
    Loan,
    UserPreferences,
)
from finance_tracker.domain.results import DebtRecommendation, NextPayment, PaymentSuggestion
from finance_tracker.domain.rules import (
    ACCOUNT_DEBT_FEE_ESTIMATE,
    ACCOUNT_DEBT_PAYOFF_MONTHS,
    ACCOUNT_DEBT_SUGGESTED_FLOOR,
    ACCOUNT_DEBT_SUGGESTED_RATE,
    HIGH_AVERAGE_INTEREST_RATE,
    HIGH_INTEREST_RATE,
    HYBRID_BALANCE_SCALE,
    HYBRID_BALANCE_WEIGHT,
    HYBRID_RATE_WEIGHT,
    LOW_ENGAGEMENT_ENTRIES,
    NEVER_PAYOFF_INTEREST_MULTIPLIER,
    NEVER_PAYOFF_MONTHS,
    SMALL_DEBT_INCOME_SHARE,
)
from finance_tracker.utils.date_utils import days_between

logger = logging.getLogger(__name__)

ACCOUNT_DEBT_REASON = "Account debt typically has high fees and should be prioritized"
URGENCY_ORDER = {"critical": 4, "high": 3, "medium": 2, "low": 1}


def validate_debt_strategy(strategy: str) -> str:
    if strategy not in DEBT_STRATEGIES:
        raise UnknownStrategyError(f"Unknown debt strategy: {strategy!r}")
    return strategy


def hybrid_score(loan: Loan) -> float:
    """Composite of rate and smallness; balances under 1 count as 1"""
    balance = max(loan.current_balance, 1.0)
    return loan.interest_rate * HYBRID_RATE_WEIGHT + (1 / balance) * HYBRID_BALANCE_WEIGHT * HYBRID_BALANCE_SCALE


def loan_sort_key(strategy: str) -> Callable[[Loan], float]:
    """Ascending sort key putting the loan to attack first at the front"""
    if strategy == "avalanche":
        return lambda loan: -loan.interest_rate
    if strategy == "snowball":
        return lambda loan: loan.current_balance
    return lambda loan: -hybrid_score(loan)


def projected_payoff_months(balance: float, payment: float, interest_rate: float) -> int:
    """
    Months to clear `balance` paying `payment` at `interest_rate` % per month.

    Returns NEVER_PAYOFF_MONTHS (999) when the payment does not cover the
    monthly interest. Callers must treat that value as "never", not as a
    projection.
    """
    if balance <= 0:
        return 0
    monthly_rate = interest_rate / 100
    if payment <= balance * monthly_rate or payment <= 0:
        return NEVER_PAYOFF_MONTHS
    if monthly_rate == 0:
        return math.ceil(balance / payment)
    return math.ceil(
        math.log(payment / (payment - balance * monthly_rate)) / math.log(1 + monthly_rate)
    )


def projected_total_interest(balance: float, payment: float, months: int) -> float:
    """Interest paid over the projection; 2x balance stands in for "never" """
    if months >= NEVER_PAYOFF_MONTHS:
        return balance * NEVER_PAYOFF_INTEREST_MULTIPLIER
    return payment * months - balance


def _loan_reason(loan: Loan, strategy: str) -> str:
    if strategy == "avalanche":
        return f"High interest rate of {loan.interest_rate}% makes this a priority for the avalanche method"
    if strategy == "snowball":
        return (
            f"Small balance of {loan.current_balance:,.0f} makes this a good quick win "
            "for the snowball method"
        )
    return "Optimized based on both interest rate and balance for maximum financial benefit"


def generate_debt_recommendations(
    loans: Sequence[Loan],
    extra_payment: float,
    strategy: str,
    accounts: Sequence[BankAccount] = (),
) -> List[DebtRecommendation]:
    """
    Build the combined, priority-ordered payoff plan.

    Requirements:
    - Account debts (negative balance / overdraft on active accounts) always
      come first, whatever the strategy
    - Loans follow, ordered by strategy:
        avalanche: highest interest rate first
        snowball:  lowest balance first
        hybrid:    highest rate*0.7 + (1/balance)*0.3*1000 first
    - Every loan gets its minimum payment; the top loan also gets the extra
    - Ties keep input order
    """
    validate_debt_strategy(strategy)
    extra_payment = max(0.0, extra_payment)
    recommendations: List[DebtRecommendation] = []

    for index, account in enumerate(aggregates.accounts_with_debt(accounts)):
        debt = aggregates.account_debt(account)
        recommendations.append(
            DebtRecommendation(
                debt_id=account.id,
                debt_name=f"{account.name} Account",
                kind="account",
                strategy=strategy,
                priority=index + 1,
                reason="Account debt should be prioritized to avoid fees and penalties",
                suggested_payment=max(debt * ACCOUNT_DEBT_SUGGESTED_RATE, ACCOUNT_DEBT_SUGGESTED_FLOOR),
                urgency_score=100 - index,
                payoff_months=ACCOUNT_DEBT_PAYOFF_MONTHS,
                total_interest=debt * ACCOUNT_DEBT_FEE_ESTIMATE,
            )
        )

    ordered = sorted(loans, key=loan_sort_key(strategy))
    offset = len(recommendations)

    for index, loan in enumerate(ordered):
        payment = loan.minimum_payment + (extra_payment if index == 0 else 0.0)
        months = projected_payoff_months(loan.current_balance, payment, loan.interest_rate)
        recommendations.append(
            DebtRecommendation(
                debt_id=loan.id,
                debt_name=loan.name,
                kind="loan",
                strategy=strategy,
                priority=offset + index + 1,
                reason=_loan_reason(loan, strategy),
                suggested_payment=payment,
                urgency_score=90 - index * 5,
                payoff_months=months,
                total_interest=projected_total_interest(loan.current_balance, payment, months),
            )
        )

    logger.debug("debt plan strategy=%s accounts=%s loans=%s", strategy, offset, len(ordered))
    return recommendations


def suggest_optimal_debt_strategy(snapshot: FinancialSnapshot) -> str:
    """
    Pick the payoff strategy that fits the user's situation.

    Decision rules, in order:
    - no loans: avalanche
    - snowball for quick wins when disposable income is negative, tracking
      engagement is low (< 10 daily entries) or any loan is below half a
      month's income
    - avalanche when any rate exceeds 15% or the average exceeds 10%
    - hybrid otherwise
    """
    loans = snapshot.loans
    if not loans:
        return "avalanche"

    average_rate = sum(loan.interest_rate for loan in loans) / len(loans)
    income = aggregates.total_monthly_income(snapshot.incomes)
    expenses = aggregates.total_monthly_expenses(snapshot.expenses)
    min_payments = aggregates.minimum_payments(loans, snapshot.bank_accounts)
    disposable = income - expenses - min_payments

    has_small_debts = any(loan.current_balance < income * SMALL_DEBT_INCOME_SHARE for loan in loans)
    has_high_interest = any(loan.interest_rate > HIGH_INTEREST_RATE for loan in loans)
    needs_motivation = len(snapshot.daily_entries) < LOW_ENGAGEMENT_ENTRIES

    if disposable < 0 or needs_motivation or has_small_debts:
        return "snowball"
    elif has_high_interest or average_rate > HIGH_AVERAGE_INTEREST_RATE:
        return "avalanche"
    return "hybrid"


def resolve_debt_strategy(preferences: UserPreferences, snapshot: FinancialSnapshot) -> str:
    """Strategy the user asked for, the suggested one when auto-suggest is on, else avalanche"""
    if preferences.auto_suggest_strategy:
        return suggest_optimal_debt_strategy(snapshot)
    return preferences.debt_strategy or "avalanche"


def generate_payment_suggestions(
    snapshot: FinancialSnapshot,
    available_amount: float,
    preferences: UserPreferences,
    today: date | None = None,
) -> List[PaymentSuggestion]:
    """
    Concrete payments to make now, most urgent first.

    Order of generation: account debts (critical), the top two loans by the
    user's debt strategy, bills due within 7 days (including overdue), then
    the first high-priority goal if it is behind or at risk. The result is
    sorted by urgency; equal urgency keeps generation order.
    """
    if today is None:
        today = date.today()
    suggestions: List[PaymentSuggestion] = []

    for index, account in enumerate(aggregates.accounts_with_debt(snapshot.bank_accounts)):
        suggestions.append(
            PaymentSuggestion(
                id=f"account-{account.id}",
                type="loan",
                name=f"{account.name} Account Debt",
                amount=min(aggregates.account_debt(account), max(0.0, available_amount) * 0.5),
                priority=index + 1,
                reason=ACCOUNT_DEBT_REASON,
                urgency="critical",
            )
        )

    strategy = preferences.debt_strategy or "avalanche"
    loans_by_id = {loan.id: loan for loan in snapshot.loans}
    loan_plan = generate_debt_recommendations(snapshot.loans, available_amount, strategy)
    for index, rec in enumerate(loan_plan[:2]):
        loan = loans_by_id[rec.debt_id]
        suggestions.append(
            PaymentSuggestion(
                id=f"loan-{loan.id}",
                type="loan",
                name=loan.name,
                amount=rec.suggested_payment,
                priority=len(suggestions) + 1,
                reason=rec.reason,
                urgency="high" if index == 0 else "medium",
                due_date=loan.due_date,
            )
        )

    for bill in snapshot.bills:
        if bill.is_paid:
            continue
        days_until_due = days_between(today, bill.due_date)
        if days_until_due <= 7:
            suggestions.append(
                PaymentSuggestion(
                    id=f"bill-{bill.id}",
                    type="bill",
                    name=bill.name,
                    amount=bill.amount,
                    priority=len(suggestions) + 1,
                    reason=f"Due in {max(0, days_until_due)} days",
                    urgency="high",
                    due_date=bill.due_date,
                )
            )

    high_priority = [g for g in snapshot.goals if g.priority == "high"]
    if high_priority:
        goal = high_priority[0]
        progress = calculate_goal_progress(goal, today)
        if progress.status in ("behind", "at-risk"):
            suggestions.append(
                PaymentSuggestion(
                    id=f"goal-{goal.id}",
                    type="goal",
                    name=goal.name,
                    amount=progress.monthly_required,
                    priority=len(suggestions) + 1,
                    reason=f"Goal is {progress.status}. Needs regular contributions to stay on track.",
                    urgency="medium",
                    due_date=goal.target_date,
                )
            )

    return sorted(suggestions, key=lambda s: URGENCY_ORDER[s.urgency], reverse=True)


def next_payment_recommendation(
    snapshot: FinancialSnapshot,
    available_amount: float,
    strategy: str = "avalanche",
    today: date | None = None,
) -> Optional[NextPayment]:
    """Single most important payment: account debt, then top loan, then a bill due within 3 days"""
    if today is None:
        today = date.today()

    indebted = aggregates.accounts_with_debt(snapshot.bank_accounts)
    if indebted:
        account = indebted[0]
        return NextPayment(
            target_id=account.id,
            name=f"{account.name} Account Debt",
            amount=min(aggregates.account_debt(account), max(0.0, available_amount) * 0.5),
            reason=ACCOUNT_DEBT_REASON,
        )

    if snapshot.loans:
        top = generate_debt_recommendations(snapshot.loans, available_amount, strategy)[0]
        return NextPayment(
            target_id=top.debt_id,
            name=top.debt_name,
            amount=top.suggested_payment,
            reason=top.reason,
        )

    for bill in snapshot.bills:
        if bill.is_paid:
            continue
        days_until_due = days_between(today, bill.due_date)
        if days_until_due <= 3:
            return NextPayment(
                target_id=bill.id,
                name=bill.name,
                amount=bill.amount,
                reason=f"Due in {max(0, days_until_due)} days",
            )

    return None

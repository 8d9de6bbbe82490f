"""Auto-allocation of monthly surplus across debt, emergency, investment and wants"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Sequence
from finance_tracker.domain import aggregates
from finance_tracker.domain.exceptions import InvalidAllocationError
from finance_tracker.domain.health import calculate_financial_health
from finance_tracker.domain.models import ALLOCATION_STRATEGIES, BankAccount, FinancialSnapshot, UserPreferences
from finance_tracker.domain.results import AllocationBreakdown, AutoAllocation, FinancialHealth
from finance_tracker.domain.rules import ACCOUNT_DEBT_ALLOCATION_RATE, OVERDRAFT_ALLOCATION_RATE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllocationSplit:
    """Shares of available surplus per bucket; whatever is left stays unallocated"""

    debt: float
    emergency: float
    investment: float
    wants: float

    def __post_init__(self) -> None:
        for name, share in self.shares().items():
            if not 0 <= share <= 1:
                raise InvalidAllocationError(f"{name} share {share} must be between 0 and 1")
        total = sum(self.shares().values())
        if total > 1 + 1e-9:
            raise InvalidAllocationError(f"Allocation shares sum to {total:.2f}, above 100%")

    def shares(self) -> Dict[str, float]:
        return {
            "debt": self.debt,
            "emergency": self.emergency,
            "investment": self.investment,
            "wants": self.wants,
        }


STRATEGY_SPLITS: Dict[str, AllocationSplit] = {
    "balanced": AllocationSplit(debt=0.2, emergency=0.1, investment=0.1, wants=0.3),
    "debt-focused": AllocationSplit(debt=0.5, emergency=0.1, investment=0.05, wants=0.15),
    "savings-focused": AllocationSplit(debt=0.1, emergency=0.2, investment=0.2, wants=0.2),
}

# Additive nudges per health level, in share points
HEALTH_NUDGES: Dict[str, Dict[str, float]] = {
    "poor": {"debt": 0.1, "emergency": 0.1, "investment": -0.1, "wants": -0.1},
    "excellent": {"debt": -0.05, "emergency": 0.0, "investment": 0.1, "wants": -0.05},
}


def apply_health_nudges(split: AllocationSplit, level: str) -> AllocationSplit:
    """
    Shift shares for the health level.

    A share pushed below zero stops at zero. If that flooring lifts the
    total above 100% (only possible for custom splits) every share is
    scaled down to fit.
    """
    nudges = HEALTH_NUDGES.get(level)
    if not nudges:
        return split
    shares = {name: max(0.0, share + nudges[name]) for name, share in split.shares().items()}
    total = sum(shares.values())
    if total > 1:
        shares = {name: min(1.0, share / total) for name, share in shares.items()}
    return AllocationSplit(**shares)


def account_debt_payment(accounts: Sequence[BankAccount]) -> float:
    """Payment toward account debt: 10% of negative balances plus 20% of overdraft used"""
    payment = 0.0
    for account in accounts:
        if not account.is_active:
            continue
        if account.balance < 0:
            payment += abs(account.balance) * ACCOUNT_DEBT_ALLOCATION_RATE
        payment += aggregates.overdraft_in_use(account) * OVERDRAFT_ALLOCATION_RATE
    return payment


def calculate_auto_allocation(
    snapshot: FinancialSnapshot,
    preferences: UserPreferences,
    health: FinancialHealth | None = None,
    split: AllocationSplit | None = None,
    today: date | None = None,
) -> AutoAllocation:
    """
    Split monthly income into debt, emergency, investment, wants and needs.

    Requirements:
    - Available surplus = income (incl. business) - expenses - minimum
      payments - account-debt payment, floored at 0
    - Shares come from `split`, or the preference strategy's preset
      (balanced 20/10/10/30, debt-focused 50/10/5/15,
      savings-focused 10/20/20/20), then health nudges apply on top
    - Minimum payments and the account-debt payment are added on top of the
      debt bucket; needs equal fixed expenses
    - unallocated = max(0, income - sum of buckets); any overrun of income
      is reported as shortfall so the books always balance
    """
    if preferences.strategy not in ALLOCATION_STRATEGIES:
        raise InvalidAllocationError(f"No allocation preset for strategy {preferences.strategy!r}")
    if health is None:
        health = calculate_financial_health(snapshot, today)

    business_profit = aggregates.business_contribution(snapshot.business_entries, today)
    total_income = aggregates.total_monthly_income(snapshot.incomes) + business_profit
    fixed_expenses = aggregates.total_monthly_expenses(snapshot.expenses)
    min_payments = aggregates.minimum_payments(snapshot.loans, snapshot.bank_accounts)
    acct_payment = account_debt_payment(snapshot.bank_accounts)

    available = max(0.0, total_income - fixed_expenses - min_payments - acct_payment)

    shares = apply_health_nudges(split or STRATEGY_SPLITS[preferences.strategy], health.level)

    extra_debt = available * shares.debt
    debt_payment = extra_debt + min_payments + acct_payment
    emergency_fund = available * shares.emergency
    investments = available * shares.investment
    wants = available * shares.wants
    needs = fixed_expenses

    total_allocated = debt_payment + emergency_fund + investments + wants + needs
    unallocated = max(0.0, total_income - total_allocated)
    shortfall = max(0.0, total_allocated - total_income)

    recommendations: List[str] = []
    if health.debt_to_income_ratio > 30:
        recommendations.append("Your debt-to-income ratio is high. Consider allocating more to debt repayment.")
    if health.emergency_fund_ratio < 0.5:
        recommendations.append(
            "Your emergency fund is below target. Prioritize building it to at least 3 months of expenses."
        )
    if health.savings_rate < 10:
        recommendations.append("Your savings rate is low. Try to increase income or reduce expenses to save more.")
    if acct_payment > 0:
        recommendations.append("Prioritize paying off account debts and overdrafts to avoid high fees and interest.")
    if shortfall > 0:
        recommendations.append("Your fixed commitments exceed your income. Review expenses before allocating.")

    logger.debug("allocation strategy=%s level=%s available=%.2f", preferences.strategy, health.level, available)

    return AutoAllocation(
        debt_payment=debt_payment,
        emergency_fund=emergency_fund,
        investments=investments,
        needs=needs,
        wants=wants,
        business_profit=business_profit,
        total_allocated=total_allocated,
        recommendations=recommendations,
        breakdown=AllocationBreakdown(
            total_income=total_income,
            fixed_expenses=fixed_expenses,
            minimum_debt_payments=min_payments,
            account_debt_payment=acct_payment,
            available_for_allocation=available,
            emergency_fund_allocation=emergency_fund,
            investment_allocation=investments,
            extra_debt_payment=extra_debt,
            wants_allocation=wants,
            unallocated=unallocated,
            shortfall=shortfall,
        ),
    )

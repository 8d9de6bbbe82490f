"""Financial health scoring - the 0-100 score every view reads from"""

import logging
from datetime import date
from typing import List
from finance_tracker.domain import aggregates
from finance_tracker.domain.models import FinancialSnapshot
from finance_tracker.domain.results import EmergencyPreparedness, FinancialHealth, HealthImprovementStep
from finance_tracker.domain.rules import EMERGENCY_FUND_MONTHS, HEALTH_LEVELS

logger = logging.getLogger(__name__)


def _debt_to_income_points(ratio: float) -> int:
    if ratio <= 10:
        return 30
    elif ratio <= 20:
        return 25
    elif ratio <= 30:
        return 20
    elif ratio <= 40:
        return 15
    elif ratio <= 50:
        return 10
    return 5


def _savings_rate_points(rate: float) -> int:
    if rate >= 20:
        return 30
    elif rate >= 15:
        return 25
    elif rate >= 10:
        return 20
    elif rate >= 5:
        return 15
    elif rate >= 0:
        return 10
    return 0


def _emergency_fund_points(ratio: float) -> int:
    if ratio >= 1:
        return 20
    elif ratio >= 0.75:
        return 15
    elif ratio >= 0.5:
        return 10
    elif ratio >= 0.25:
        return 5
    return 0


def _net_worth_points(net_worth: float, monthly_income: float) -> int:
    if net_worth > monthly_income * 12:
        return 10
    elif net_worth > monthly_income * 6:
        return 8
    elif net_worth > monthly_income * 3:
        return 6
    elif net_worth > 0:
        return 4
    return 0


def _income_diversity_points(source_count: int) -> int:
    if source_count > 2:
        return 5
    elif source_count > 1:
        return 3
    return 0


def _business_points(contribution: float, monthly_income: float) -> int:
    if contribution > monthly_income * 0.2:
        return 5
    elif contribution > 0:
        return 3
    return 0


def health_level(score: int) -> str:
    """Map a score to poor / fair / good / excellent"""
    for threshold, level in HEALTH_LEVELS:
        if score >= threshold:
            return level
    return "poor"


def calculate_financial_health(snapshot: FinancialSnapshot, today: date | None = None) -> FinancialHealth:
    """
    Score a user's overall financial position from 0 (worst) to 100 (best).

    Scoring buckets:
    - 30: Debt-to-income (minimum payments / income)
    - 30: Savings rate ((income - expenses - minimum payments) / income)
    - 20: Emergency fund (savings balances / 6 months of burn)
    - 10: Net worth relative to monthly income
    -  5: Number of income sources
    -  5: Business profit relative to income

    An empty profile (no income, expenses, debt or emergency funds) scores 0
    instead of whatever the buckets would award.
    """
    business = aggregates.business_contribution(snapshot.business_entries, today)
    income = aggregates.total_monthly_income(snapshot.incomes) + business
    expenses = aggregates.total_monthly_expenses(snapshot.expenses)
    debt = aggregates.total_debt(snapshot.loans, snapshot.bank_accounts)
    min_payments = aggregates.minimum_payments(snapshot.loans, snapshot.bank_accounts)
    worth = aggregates.net_worth(
        snapshot.bank_accounts, snapshot.loans, snapshot.goals, snapshot.expected_payments
    )

    # Ratios (zero income is the worst debt load and a zero savings rate)
    debt_to_income = min_payments / income * 100 if income > 0 else 100.0
    savings_rate = (income - expenses - min_payments) / income * 100 if income > 0 else 0.0

    monthly_burn = expenses + min_payments
    funds = aggregates.emergency_funds(snapshot.bank_accounts)
    emergency_ratio = funds / (monthly_burn * EMERGENCY_FUND_MONTHS) if monthly_burn > 0 else 0.0

    if income == 0 and expenses == 0 and debt == 0 and funds == 0:
        score = 0
    else:
        score = (
            _debt_to_income_points(debt_to_income)
            + _savings_rate_points(savings_rate)
            + _emergency_fund_points(emergency_ratio)
            + _net_worth_points(worth, income)
            + _income_diversity_points(len(snapshot.incomes))
            + _business_points(business, income)
        )

    recommendations: List[str] = []
    if debt_to_income > 30:
        recommendations.append("Focus on reducing debt to improve your debt-to-income ratio")
    if savings_rate < 10:
        recommendations.append("Increase your savings rate by reducing expenses or increasing income")
    if emergency_ratio < 0.5:
        recommendations.append("Build your emergency fund to cover at least 3-6 months of expenses")
    if worth < 0:
        recommendations.append("Work on increasing your net worth by paying down debt and building assets")
    if len(snapshot.incomes) <= 1:
        recommendations.append("Consider developing additional income streams to increase financial security")

    if debt_to_income > 40 or debt > income * 6:
        suggested = "debt-focused"
    elif emergency_ratio < 0.5 or savings_rate < 10:
        suggested = "savings-focused"
    else:
        suggested = "balanced"

    logger.debug("health score=%s dti=%.1f savings=%.1f emergency=%.2f", score, debt_to_income, savings_rate, emergency_ratio)

    return FinancialHealth(
        score=score,
        level=health_level(score),
        debt_to_income_ratio=debt_to_income,
        emergency_fund_ratio=emergency_ratio,
        savings_rate=savings_rate,
        net_worth=worth,
        business_contribution=business,
        recommendations=recommendations,
        suggested_strategy=suggested,
    )


_IMPACT_WEIGHT = {"high": 3, "medium": 2, "low": 1}
_EASE_WEIGHT = {"easy": 3, "medium": 2, "hard": 1}


def generate_health_improvement_steps(
    health: FinancialHealth,
    snapshot: FinancialSnapshot,
) -> List[HealthImprovementStep]:
    """
    Concrete actions that would raise the health score, best payoff first.

    Steps are ranked by impact plus ease; ties keep generation order.
    """
    if not (snapshot.incomes or snapshot.expenses or snapshot.loans or snapshot.bank_accounts):
        return []

    steps: List[HealthImprovementStep] = []
    monthly_expenses = aggregates.total_monthly_expenses(snapshot.expenses)
    income = aggregates.total_monthly_income(snapshot.incomes)

    if health.emergency_fund_ratio < 1:
        funds = aggregates.emergency_funds(snapshot.bank_accounts)
        months_covered = funds / max(1.0, monthly_expenses)
        steps.append(
            HealthImprovementStep(
                id="emergency-fund",
                title="Build Emergency Fund",
                description=(
                    f"Increase your emergency fund to cover {EMERGENCY_FUND_MONTHS} months of expenses. "
                    f"Currently at {months_covered:.1f} months "
                    f"({health.emergency_fund_ratio * 100:.1f}% of target)."
                ),
                impact="high",
                difficulty="medium",
                estimated_timeframe="6-12 months",
                potential_score_increase=15,
                category="emergency",
            )
        )

    if snapshot.loans and health.debt_to_income_ratio > 30:
        # max() keeps the first loan on ties
        costliest = max(snapshot.loans, key=lambda loan: loan.interest_rate)
        steps.append(
            HealthImprovementStep(
                id="reduce-debt",
                title=f"Pay Down {costliest.name}",
                description=(
                    f"Focus on paying down your {costliest.name} with {costliest.interest_rate}% "
                    f"interest rate. Current balance: {costliest.current_balance:,.0f}."
                ),
                impact="high",
                difficulty="hard",
                estimated_timeframe="12-24 months",
                potential_score_increase=20,
                category="debt",
            )
        )

    indebted = aggregates.accounts_with_debt(snapshot.bank_accounts)
    if indebted:
        worst = max(indebted, key=aggregates.account_debt)
        steps.append(
            HealthImprovementStep(
                id=f"account-debt-{worst.id}",
                title=f"Clear {worst.name} Account Debt",
                description=(
                    f"Pay off the negative balance and overdraft in your {worst.name} account. "
                    f"Current debt: {aggregates.account_debt(worst):,.0f}."
                ),
                impact="high",
                difficulty="medium",
                estimated_timeframe="1-3 months",
                potential_score_increase=15,
                category="debt",
            )
        )

    savings_rate = (income - monthly_expenses) / income * 100 if income > 0 else 0.0
    wants = [e for e in snapshot.expenses if e.category == "want"]
    if savings_rate < 20:
        top_wants = sorted(wants, key=lambda e: e.monthly_amount, reverse=True)[:3]
        names = ", ".join(e.name for e in top_wants)
        potential = sum(e.monthly_amount * 0.2 for e in top_wants)
        steps.append(
            HealthImprovementStep(
                id="increase-savings",
                title="Increase Savings Rate",
                description=(
                    f"Your current savings rate is {savings_rate:.1f}% of income, below the recommended 20%. "
                    f"Consider reducing discretionary expenses like {names or 'dining out'} "
                    f"to save approximately {potential:,.0f}/month more."
                ),
                impact="medium",
                difficulty="medium",
                estimated_timeframe="3-6 months",
                potential_score_increase=10,
                category="savings",
            )
        )

    if len(snapshot.incomes) == 1:
        steps.append(
            HealthImprovementStep(
                id="diversify-income",
                title="Diversify Income Sources",
                description=(
                    f"You currently rely on a single income source ({snapshot.incomes[0].source}). "
                    "Consider developing additional income streams to reduce financial risk."
                ),
                impact="medium",
                difficulty="hard",
                estimated_timeframe="6-12 months",
                potential_score_increase=8,
                category="income",
            )
        )

    total_wants = sum(e.monthly_amount for e in wants)
    if wants and total_wants > income * 0.3:
        largest = max(wants, key=lambda e: e.monthly_amount)
        steps.append(
            HealthImprovementStep(
                id=f"optimize-expense-{largest.id}",
                title=f"Reduce {largest.name} Expense",
                description=(
                    f"Your {largest.name} expense of {largest.monthly_amount:,.0f}/month is significant. "
                    "Consider ways to reduce this cost by 20% to improve your wants-to-income ratio."
                ),
                impact="medium",
                difficulty="easy",
                estimated_timeframe="1-3 months",
                potential_score_increase=12,
                category="expenses",
            )
        )

    return sorted(steps, key=lambda s: _IMPACT_WEIGHT[s.impact] + _EASE_WEIGHT[s.difficulty], reverse=True)


def _preparedness_level(score: float) -> str:
    if score >= 80:
        return "well-prepared"
    elif score >= 60:
        return "prepared"
    elif score >= 40:
        return "basic"
    return "unprepared"


def calculate_emergency_preparedness(snapshot: FinancialSnapshot) -> EmergencyPreparedness:
    """
    How well liquid assets would absorb an income shock.

    Scoring weights:
    - 40: months of expenses covered by checking + savings
    - 30: loan minimums relative to income
    - 20: income stability (more than one source is steadier)
    - 10: liquid assets against three months of expenses
    """
    if not (snapshot.bank_accounts or snapshot.incomes or snapshot.expenses or snapshot.loans):
        return EmergencyPreparedness(
            score=0,
            level="unprepared",
            emergency_fund_months=0.0,
            liquid_assets=0.0,
            debt_to_income_ratio=0.0,
            income_stability=0.0,
            recommendations=[
                "Start building an emergency fund as soon as you begin receiving income",
                "Aim to save at least 3-6 months of expenses in a liquid savings account",
                "Consider setting up automatic transfers to your emergency fund",
            ],
        )

    income = aggregates.total_monthly_income(snapshot.incomes)
    expenses = aggregates.total_monthly_expenses(snapshot.expenses)
    loan_minimums = sum(loan.minimum_payment for loan in snapshot.loans)

    liquid = sum(
        max(0.0, a.balance)
        for a in snapshot.bank_accounts
        if a.is_active and a.type in ("checking", "savings")
    )
    months_covered = liquid / expenses if expenses > 0 else 0.0
    debt_to_income = loan_minimums / income * 100 if income > 0 else 100.0
    stability = 0.8 if len(snapshot.incomes) > 1 else 0.6

    score = 0.0
    if months_covered >= 6:
        score += 40
    elif months_covered >= 3:
        score += 30
    elif months_covered >= 1:
        score += 20
    else:
        score += months_covered * 20

    if debt_to_income <= 20:
        score += 30
    elif debt_to_income <= 40:
        score += 20
    elif debt_to_income <= 60:
        score += 10

    score += stability * 20

    three_months = expenses * 3
    if liquid >= three_months:
        score += 10
    else:
        score += liquid / three_months * 10

    score = min(100.0, max(0.0, score))

    recommendations: List[str] = []
    if months_covered < 3 and three_months - liquid > 0:
        recommendations.append(
            f"Build emergency fund by adding {three_months - liquid:,.0f} to reach 3 months of expenses "
            f"({three_months:,.0f})"
        )
    if debt_to_income > 40:
        if snapshot.loans:
            costliest = max(snapshot.loans, key=lambda loan: loan.interest_rate)
            recommendations.append(
                f"Focus on reducing your {costliest.name} with {costliest.interest_rate}% interest rate "
                "to improve financial flexibility"
            )
        else:
            recommendations.append("Focus on reducing debt to improve financial flexibility")
    if len(snapshot.incomes) == 1:
        recommendations.append(
            f"Consider developing additional income sources beyond your current {snapshot.incomes[0].source}"
        )
    if liquid < expenses:
        recommendations.append(
            f"Increase liquid savings by at least {expenses - liquid:,.0f} for immediate access to funds"
        )

    return EmergencyPreparedness(
        score=round(score),
        level=_preparedness_level(score),
        emergency_fund_months=months_covered,
        liquid_assets=liquid,
        debt_to_income_ratio=debt_to_income,
        income_stability=stability,
        recommendations=recommendations,
    )

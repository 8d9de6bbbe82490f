"""Derived results - recomputed from records on every call, never stored"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional
from finance_tracker.domain.models import Bill, ExpectedPayment
from finance_tracker.domain.rules import NEVER_PAYOFF_MONTHS


@dataclass(frozen=True)
class FinancialHealth:
    """Output of the health scorer"""

    score: int
    level: str  # poor | fair | good | excellent
    debt_to_income_ratio: float
    emergency_fund_ratio: float
    savings_rate: float
    net_worth: float
    business_contribution: float
    recommendations: List[str]
    suggested_strategy: str  # debt-focused | balanced | savings-focused


@dataclass(frozen=True)
class GoalProgress:
    """Projection of a single goal against its deadline"""

    goal_id: str
    goal_name: str
    target_amount: float
    current_amount: float
    target_date: date
    days_remaining: int
    months_remaining: int
    progress_percentage: float
    elapsed_percentage: float
    monthly_required: float
    is_on_track: bool
    status: str  # ahead | on-track | behind | at-risk


@dataclass(frozen=True)
class GoalMilestone:
    percentage: int
    amount: float
    estimated_date: date
    achieved: bool


@dataclass(frozen=True)
class GoalForecast:
    goal_id: str
    projected_completion_date: date
    monthly_contribution_needed: float
    probability_of_success: int
    recommended_adjustments: List[str]
    milestones: List[GoalMilestone]


@dataclass(frozen=True)
class DebtRecommendation:
    """One entry of the priority-ordered payoff plan"""

    debt_id: str
    debt_name: str
    kind: str  # account | loan
    strategy: str
    priority: int
    reason: str
    suggested_payment: float
    urgency_score: int
    payoff_months: int
    total_interest: float

    @property
    def never_paid_off(self) -> bool:
        return self.payoff_months == NEVER_PAYOFF_MONTHS


@dataclass(frozen=True)
class PaymentSuggestion:
    id: str
    type: str  # loan | bill | goal
    name: str
    amount: float
    priority: int
    reason: str
    urgency: str  # critical | high | medium | low
    due_date: Optional[date] = None
    completed: bool = False


@dataclass(frozen=True)
class NextPayment:
    target_id: str
    name: str
    amount: float
    reason: str


@dataclass(frozen=True)
class AllocationBreakdown:
    total_income: float
    fixed_expenses: float
    minimum_debt_payments: float
    account_debt_payment: float
    available_for_allocation: float
    emergency_fund_allocation: float
    investment_allocation: float
    extra_debt_payment: float
    wants_allocation: float
    unallocated: float
    shortfall: float


@dataclass(frozen=True)
class AutoAllocation:
    """Split of monthly income across buckets"""

    debt_payment: float
    emergency_fund: float
    investments: float
    needs: float
    wants: float
    business_profit: float
    total_allocated: float
    recommendations: List[str]
    breakdown: AllocationBreakdown


@dataclass(frozen=True)
class SpendingAllowance:
    allowed_wants_spending: float
    current_wants_spending: float
    remaining_wants_allowance: float
    can_spend: bool
    recommendations: List[str]
    restrictions: List[str]


@dataclass(frozen=True)
class UserLevel:
    level: int
    current_level_points: int
    next_level_points: int


@dataclass(frozen=True)
class Celebration:
    id: str
    type: str  # milestone | level_up | streak
    title: str
    message: str
    amount: Optional[float] = None


@dataclass(frozen=True)
class HealthImprovementStep:
    id: str
    title: str
    description: str
    impact: str  # high | medium | low
    difficulty: str  # easy | medium | hard
    estimated_timeframe: str
    potential_score_increase: int
    category: str


@dataclass(frozen=True)
class EmergencyPreparedness:
    score: int
    level: str  # unprepared | basic | prepared | well-prepared
    emergency_fund_months: float
    liquid_assets: float
    debt_to_income_ratio: float
    income_stability: float
    recommendations: List[str]


@dataclass(frozen=True)
class TrendPoint:
    period_start: date
    income: float
    expenses: float
    net_income: float
    business_profit: float
    total_debt: float
    net_worth: float


@dataclass(frozen=True)
class TrendComparison:
    metric: str
    current: float
    previous: float
    change: float
    change_percent: float
    trend: str  # up | down | stable
    is_good: bool


@dataclass(frozen=True)
class DashboardSummary:
    net_worth: float
    total_monthly_income: float
    total_monthly_expenses: float
    total_needs: float
    total_wants: float
    total_debt: float
    health: FinancialHealth
    allowance: SpendingAllowance
    allocation: AutoAllocation
    goals_on_track: int
    goals_completed: int
    urgent_goals: int
    upcoming_bills: List[Bill] = field(default_factory=list)
    upcoming_expected_payments: List[ExpectedPayment] = field(default_factory=list)
    overdue_expected_payments: List[ExpectedPayment] = field(default_factory=list)


@dataclass(frozen=True)
class TrendAssessment:
    status: str  # improving | stable | mixed | declining | poor
    message: str

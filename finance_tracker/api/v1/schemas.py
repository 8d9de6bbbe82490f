"""Pydantic schemas for API responses"""

from datetime import date
from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class ResultSchema(BaseModel):
    """Base for schemas built from domain result dataclasses"""

    model_config = ConfigDict(from_attributes=True)


class FinancialHealthResponse(ResultSchema):
    """Response for GET /v1/financial-health"""

    score: int
    level: str
    debt_to_income_ratio: float
    emergency_fund_ratio: float
    savings_rate: float
    net_worth: float
    business_contribution: float
    recommendations: List[str]
    suggested_strategy: str


class AllocationBreakdownSchema(ResultSchema):
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


class AutoAllocationResponse(ResultSchema):
    """Response for GET /v1/allocation"""

    debt_payment: float
    emergency_fund: float
    investments: float
    needs: float
    wants: float
    business_profit: float
    total_allocated: float
    recommendations: List[str]
    breakdown: AllocationBreakdownSchema


class DebtRecommendationSchema(ResultSchema):
    """Single entry in a payoff plan; payoff_months 999 means never paid off"""

    debt_id: str
    debt_name: str
    kind: str
    strategy: str
    priority: int
    reason: str
    suggested_payment: float
    urgency_score: int
    payoff_months: int
    total_interest: float
    never_paid_off: bool


class NextPaymentSchema(ResultSchema):
    target_id: str
    name: str
    amount: float
    reason: str


class DebtPlanResponse(BaseModel):
    """Response for GET /v1/debt-plan"""

    user_id: str
    strategy: str
    suggested_strategy: str
    extra_payment: float
    recommendations: List[DebtRecommendationSchema]
    next_payment: Optional[NextPaymentSchema] = None


class PaymentSuggestionSchema(ResultSchema):
    id: str
    type: str
    name: str
    amount: float
    priority: int
    reason: str
    urgency: str
    due_date: Optional[date] = None
    completed: bool = False


class PaymentSuggestionsResponse(BaseModel):
    """Response for GET /v1/payment-suggestions"""

    user_id: str
    available_amount: float
    suggestions: List[PaymentSuggestionSchema]


class GoalProgressSchema(ResultSchema):
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
    status: str


class GoalsProgressResponse(BaseModel):
    """Response for GET /v1/goals/progress"""

    user_id: str
    goals: List[GoalProgressSchema]


class GoalMilestoneSchema(ResultSchema):
    percentage: int
    amount: float
    estimated_date: date
    achieved: bool


class GoalForecastSchema(ResultSchema):
    goal_id: str
    projected_completion_date: date
    monthly_contribution_needed: float
    probability_of_success: int
    recommended_adjustments: List[str]
    milestones: List[GoalMilestoneSchema]


class GoalForecastsResponse(BaseModel):
    """Response for GET /v1/goals/forecast"""

    user_id: str
    savings_rate: float
    forecasts: List[GoalForecastSchema]


class HealthImprovementStepSchema(ResultSchema):
    id: str
    title: str
    description: str
    impact: str
    difficulty: str
    estimated_timeframe: str
    potential_score_increase: int
    category: str


class EmergencyPreparednessSchema(ResultSchema):
    score: int
    level: str
    emergency_fund_months: float
    liquid_assets: float
    debt_to_income_ratio: float
    income_stability: float
    recommendations: List[str]


class HealthImprovementsResponse(BaseModel):
    """Response for GET /v1/financial-health/improvements"""

    user_id: str
    score: int
    level: str
    steps: List[HealthImprovementStepSchema]
    preparedness: EmergencyPreparednessSchema


class SpendingAllowanceResponse(ResultSchema):
    """Response for GET /v1/spending-allowance"""

    allowed_wants_spending: float
    current_wants_spending: float
    remaining_wants_allowance: float
    can_spend: bool
    recommendations: List[str]
    restrictions: List[str]


class TrendPointSchema(ResultSchema):
    period_start: date
    income: float
    expenses: float
    net_income: float
    business_profit: float
    total_debt: float
    net_worth: float


class TrendComparisonSchema(ResultSchema):
    metric: str
    current: float
    previous: float
    change: float
    change_percent: float
    trend: str
    is_good: bool


class TrendsResponse(BaseModel):
    """Response for GET /v1/trends"""

    user_id: str
    status: str
    message: str
    points: List[TrendPointSchema]
    comparisons: List[TrendComparisonSchema]


class BillSchema(ResultSchema):
    id: str
    name: str
    amount: float
    due_date: date
    category: str


class ExpectedPaymentSchema(ResultSchema):
    id: str
    type: str
    name: str
    amount: float
    expected_date: date


class DashboardResponse(ResultSchema):
    """Response for GET /v1/dashboard"""

    net_worth: float
    total_monthly_income: float
    total_monthly_expenses: float
    total_needs: float
    total_wants: float
    total_debt: float
    health: FinancialHealthResponse
    allowance: SpendingAllowanceResponse
    allocation: AutoAllocationResponse
    goals_on_track: int
    goals_completed: int
    urgent_goals: int
    upcoming_bills: List[BillSchema]
    upcoming_expected_payments: List[ExpectedPaymentSchema]
    overdue_expected_payments: List[ExpectedPaymentSchema]


class ChallengeSchema(ResultSchema):
    id: str
    title: str
    description: str
    type: str
    category: str
    target: float
    current: float
    points: int
    deadline: date
    difficulty: str
    is_completed: bool
    is_active: bool
    loan_id: Optional[str] = None
    goal_id: Optional[str] = None


class ChallengesResponse(BaseModel):
    """Response for POST /v1/challenges/refresh"""

    user_id: str
    challenges: List[ChallengeSchema]
    generated: List[ChallengeSchema]


class UserProgressSchema(ResultSchema):
    total_points: int
    level: int
    current_level_points: int
    next_level_points: int
    streak: int
    longest_streak: int
    challenges_completed: int
    achievements_unlocked: int
    financial_health_improvement: int
    last_activity_date: Optional[date] = None


class CelebrationSchema(ResultSchema):
    id: str
    type: str
    title: str
    message: str
    amount: Optional[float] = None


class ChallengeCompletionResponse(BaseModel):
    """Response for POST /v1/challenges/{challenge_id}/complete"""

    user_id: str
    challenge: ChallengeSchema
    progress: UserProgressSchema
    celebrations: List[CelebrationSchema]

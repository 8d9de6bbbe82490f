"""Domain models - immutable records owned by the persistence layer"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple
from finance_tracker.domain.exceptions import UnknownStrategyError
from finance_tracker.domain.money import monthly_amount

ALLOCATION_STRATEGIES = ("debt-focused", "balanced", "savings-focused")
DEBT_STRATEGIES = ("avalanche", "snowball", "hybrid")
RISK_TOLERANCES = ("conservative", "moderate", "aggressive")


@dataclass(frozen=True)
class BankAccount:
    """Bank, cash or card account"""

    id: str
    name: str
    type: str  # checking | savings | credit | investment | cash
    balance: float
    is_active: bool = True
    has_overdraft: bool = False
    overdraft_limit: Optional[float] = None
    overdraft_used: Optional[float] = None


@dataclass(frozen=True)
class Income:
    """Recurring income source"""

    id: str
    source: str
    amount: float
    frequency: str  # weekly | biweekly | monthly | yearly
    bank_account_id: Optional[str] = None

    @property
    def monthly_amount(self) -> float:
        return monthly_amount(self.amount, self.frequency)


@dataclass(frozen=True)
class Expense:
    """Recurring expense"""

    id: str
    name: str
    amount: float
    frequency: str
    category: str  # need | want
    bank_account_id: Optional[str] = None

    @property
    def monthly_amount(self) -> float:
        return monthly_amount(self.amount, self.frequency)


@dataclass(frozen=True)
class Loan:
    """Installment loan; interest_rate is a monthly percentage"""

    id: str
    name: str
    principal: float
    current_balance: float
    interest_rate: float
    minimum_payment: float
    due_date: Optional[date] = None
    lender: str = ""


@dataclass(frozen=True)
class Bill:
    """Scheduled bill"""

    id: str
    name: str
    amount: float
    due_date: date
    frequency: str = "monthly"
    category: str = "other"  # utility | subscription | insurance | other
    is_paid: bool = False


@dataclass(frozen=True)
class DailyEntry:
    """One day's manually tracked income and spending"""

    id: str
    date: date
    income: float = 0.0
    expenses: float = 0.0
    category: Optional[str] = None
    description: str = ""


@dataclass(frozen=True)
class BusinessEntry:
    """Daily business sales record"""

    id: str
    date: date
    sales: float
    stock_value: float
    profit: float
    profit_to_goal: float = 0.0
    description: str = ""


@dataclass(frozen=True)
class FinancialGoal:
    """Savings goal"""

    id: str
    name: str
    target_amount: float
    current_amount: float
    target_date: date
    category: str  # emergency | investment | purchase | vacation | other
    priority: str  # high | medium | low
    created_at: Optional[date] = None


@dataclass(frozen=True)
class ExpectedPayment:
    """Money owed to or by the user, not yet settled"""

    id: str
    type: str  # income | expense
    name: str
    amount: float
    expected_date: date
    is_paid: bool = False


@dataclass(frozen=True)
class UserPreferences:
    """User-supplied configuration, read-only for the engine"""

    strategy: str = "balanced"
    risk_tolerance: str = "moderate"
    emergency_fund_months: int = 6
    auto_allocate: bool = True
    reminder_time: str = "09:00"
    currency: str = "KES"
    debt_strategy: Optional[str] = None
    auto_suggest_strategy: bool = False

    def __post_init__(self) -> None:
        if self.strategy not in ALLOCATION_STRATEGIES:
            raise UnknownStrategyError(f"Unknown allocation strategy: {self.strategy!r}")
        if self.debt_strategy is not None and self.debt_strategy not in DEBT_STRATEGIES:
            raise UnknownStrategyError(f"Unknown debt strategy: {self.debt_strategy!r}")
        if self.risk_tolerance not in RISK_TOLERANCES:
            raise UnknownStrategyError(f"Unknown risk tolerance: {self.risk_tolerance!r}")


@dataclass(frozen=True)
class Challenge:
    """Gamification challenge; loan_id/goal_id reference the tracked entity"""

    id: str
    title: str
    description: str
    type: str  # daily | weekly | monthly
    category: str  # savings | debt | income | tracking | goals | investment
    target: float
    current: float
    points: int
    deadline: date
    difficulty: str  # easy | medium | hard
    is_completed: bool = False
    is_active: bool = True
    loan_id: Optional[str] = None
    goal_id: Optional[str] = None


@dataclass(frozen=True)
class UserProgress:
    """Accumulated gamification state"""

    total_points: int = 0
    level: int = 1
    current_level_points: int = 0
    next_level_points: int = 100
    streak: int = 0
    longest_streak: int = 0
    challenges_completed: int = 0
    achievements_unlocked: int = 0
    financial_health_improvement: int = 0
    last_activity_date: Optional[date] = None


@dataclass(frozen=True)
class FinancialSnapshot:
    """A single user's full record set, read consistently from the store"""

    bank_accounts: Tuple[BankAccount, ...] = field(default_factory=tuple)
    incomes: Tuple[Income, ...] = field(default_factory=tuple)
    expenses: Tuple[Expense, ...] = field(default_factory=tuple)
    loans: Tuple[Loan, ...] = field(default_factory=tuple)
    bills: Tuple[Bill, ...] = field(default_factory=tuple)
    daily_entries: Tuple[DailyEntry, ...] = field(default_factory=tuple)
    business_entries: Tuple[BusinessEntry, ...] = field(default_factory=tuple)
    goals: Tuple[FinancialGoal, ...] = field(default_factory=tuple)
    expected_payments: Tuple[ExpectedPayment, ...] = field(default_factory=tuple)

    def has_data(self) -> bool:
        """True when any record that challenges can react to exists"""
        return bool(
            self.incomes
            or self.expenses
            or self.loans
            or self.daily_entries
            or self.business_entries
            or self.goals
        )

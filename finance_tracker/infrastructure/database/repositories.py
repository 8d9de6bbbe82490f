"""Data access layer - maps stored rows to domain records and back"""

from typing import List, Sequence
from sqlalchemy.orm import Session
from finance_tracker.domain.exceptions import RecordNotFoundError
from finance_tracker.domain.models import (
    BankAccount,
    Bill,
    BusinessEntry,
    Challenge,
    DailyEntry,
    ExpectedPayment,
    Expense,
    FinancialGoal,
    FinancialSnapshot,
    Income,
    Loan,
    UserPreferences,
    UserProgress,
)
from finance_tracker.infrastructure.database.models import (
    BankAccountRecord,
    BillRecord,
    BusinessEntryRecord,
    ChallengeRecord,
    DailyEntryRecord,
    ExpectedPaymentRecord,
    ExpenseRecord,
    FinancialGoalRecord,
    IncomeRecord,
    LoanRecord,
    UserPreferencesRecord,
    UserProgressRecord,
)


class FinancialRecordRepository:
    """Read side for a user's financial records"""

    def __init__(self, db: Session):
        self.db = db

    def _rows(self, model, user_id: str) -> list:
        # Creation order keeps "first goal" / "first account" lookups stable
        return self.db.query(model).filter(model.user_id == user_id).order_by(model.created_at, model.id).all()

    def load_snapshot(self, user_id: str) -> FinancialSnapshot:
        """Read every record type for the user in one session"""
        return FinancialSnapshot(
            bank_accounts=tuple(
                BankAccount(
                    id=r.id,
                    name=r.name,
                    type=r.type,
                    balance=r.balance,
                    is_active=r.is_active,
                    has_overdraft=r.has_overdraft,
                    overdraft_limit=r.overdraft_limit,
                    overdraft_used=r.overdraft_used,
                )
                for r in self._rows(BankAccountRecord, user_id)
            ),
            incomes=tuple(
                Income(
                    id=r.id,
                    source=r.source,
                    amount=r.amount,
                    frequency=r.frequency,
                    bank_account_id=r.bank_account_id,
                )
                for r in self._rows(IncomeRecord, user_id)
            ),
            expenses=tuple(
                Expense(
                    id=r.id,
                    name=r.name,
                    amount=r.amount,
                    frequency=r.frequency,
                    category=r.category,
                    bank_account_id=r.bank_account_id,
                )
                for r in self._rows(ExpenseRecord, user_id)
            ),
            loans=tuple(
                Loan(
                    id=r.id,
                    name=r.name,
                    principal=r.principal,
                    current_balance=r.current_balance,
                    interest_rate=r.interest_rate,
                    minimum_payment=r.minimum_payment,
                    due_date=r.due_date,
                    lender=r.lender,
                )
                for r in self._rows(LoanRecord, user_id)
            ),
            bills=tuple(
                Bill(
                    id=r.id,
                    name=r.name,
                    amount=r.amount,
                    due_date=r.due_date,
                    frequency=r.frequency,
                    category=r.category,
                    is_paid=r.is_paid,
                )
                for r in self._rows(BillRecord, user_id)
            ),
            daily_entries=tuple(
                DailyEntry(
                    id=r.id,
                    date=r.date,
                    income=r.income,
                    expenses=r.expenses,
                    category=r.category,
                    description=r.description,
                )
                for r in self._rows(DailyEntryRecord, user_id)
            ),
            business_entries=tuple(
                BusinessEntry(
                    id=r.id,
                    date=r.date,
                    sales=r.sales,
                    stock_value=r.stock_value,
                    profit=r.profit,
                    profit_to_goal=r.profit_to_goal,
                    description=r.description,
                )
                for r in self._rows(BusinessEntryRecord, user_id)
            ),
            goals=tuple(
                FinancialGoal(
                    id=r.id,
                    name=r.name,
                    target_amount=r.target_amount,
                    current_amount=r.current_amount,
                    target_date=r.target_date,
                    category=r.category,
                    priority=r.priority,
                    created_at=r.created_on,
                )
                for r in self._rows(FinancialGoalRecord, user_id)
            ),
            expected_payments=tuple(
                ExpectedPayment(
                    id=r.id,
                    type=r.type,
                    name=r.name,
                    amount=r.amount,
                    expected_date=r.expected_date,
                    is_paid=r.is_paid,
                )
                for r in self._rows(ExpectedPaymentRecord, user_id)
            ),
        )

    def load_preferences(self, user_id: str, default_currency: str = "KES") -> UserPreferences:
        """Stored preferences, or defaults for a user who never saved any"""
        row = self.db.query(UserPreferencesRecord).filter(UserPreferencesRecord.user_id == user_id).first()
        if row is None:
            return UserPreferences(currency=default_currency)
        return UserPreferences(
            strategy=row.strategy,
            risk_tolerance=row.risk_tolerance,
            emergency_fund_months=row.emergency_fund_months,
            auto_allocate=row.auto_allocate,
            reminder_time=row.reminder_time,
            currency=row.currency,
            debt_strategy=row.debt_strategy,
            auto_suggest_strategy=row.auto_suggest_strategy,
        )


def _to_challenge(row: ChallengeRecord) -> Challenge:
    return Challenge(
        id=row.id,
        title=row.title,
        description=row.description,
        type=row.type,
        category=row.category,
        target=row.target,
        current=row.current,
        points=row.points,
        deadline=row.deadline,
        difficulty=row.difficulty,
        is_completed=row.is_completed,
        is_active=row.is_active,
        loan_id=row.loan_id,
        goal_id=row.goal_id,
    )


class ChallengeRepository:
    """Repository for gamification challenges"""

    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user_id: str) -> List[Challenge]:
        rows = (
            self.db.query(ChallengeRecord)
            .filter(ChallengeRecord.user_id == user_id)
            .order_by(ChallengeRecord.created_at, ChallengeRecord.id)
            .all()
        )
        return [_to_challenge(r) for r in rows]

    def get(self, user_id: str, challenge_id: str) -> Challenge:
        row = (
            self.db.query(ChallengeRecord)
            .filter(ChallengeRecord.user_id == user_id, ChallengeRecord.id == challenge_id)
            .first()
        )
        if row is None:
            raise RecordNotFoundError(f"Challenge {challenge_id} not found for user {user_id}")
        return _to_challenge(row)

    def save_all(self, user_id: str, challenges: Sequence[Challenge]) -> None:
        """Insert new challenges and update existing ones by (user_id, id)"""
        for challenge in challenges:
            row = (
                self.db.query(ChallengeRecord)
                .filter(ChallengeRecord.user_id == user_id, ChallengeRecord.id == challenge.id)
                .first()
            )
            if row is None:
                row = ChallengeRecord(id=challenge.id, user_id=user_id)
                self.db.add(row)
            row.title = challenge.title
            row.description = challenge.description
            row.type = challenge.type
            row.category = challenge.category
            row.target = challenge.target
            row.current = challenge.current
            row.points = challenge.points
            row.deadline = challenge.deadline
            row.difficulty = challenge.difficulty
            row.is_completed = challenge.is_completed
            row.is_active = challenge.is_active
            row.loan_id = challenge.loan_id
            row.goal_id = challenge.goal_id
        self.db.flush()


class ProgressRepository:
    """Repository for accumulated user progress"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> UserProgress:
        """Stored progress, or a fresh level-1 record"""
        row = self.db.get(UserProgressRecord, user_id)
        if row is None:
            return UserProgress()
        return UserProgress(
            total_points=row.total_points,
            level=row.level,
            current_level_points=row.current_level_points,
            next_level_points=row.next_level_points,
            streak=row.streak,
            longest_streak=row.longest_streak,
            challenges_completed=row.challenges_completed,
            achievements_unlocked=row.achievements_unlocked,
            financial_health_improvement=row.financial_health_improvement,
            last_activity_date=row.last_activity_date,
        )

    def save(self, user_id: str, progress: UserProgress) -> None:
        row = self.db.get(UserProgressRecord, user_id)
        if row is None:
            row = UserProgressRecord(user_id=user_id)
            self.db.add(row)
        row.total_points = progress.total_points
        row.level = progress.level
        row.current_level_points = progress.current_level_points
        row.next_level_points = progress.next_level_points
        row.streak = progress.streak
        row.longest_streak = progress.longest_streak
        row.challenges_completed = progress.challenges_completed
        row.achievements_unlocked = progress.achievements_unlocked
        row.financial_health_improvement = progress.financial_health_improvement
        row.last_activity_date = progress.last_activity_date
        self.db.flush()

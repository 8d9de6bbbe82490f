"""SQLAlchemy ORM models, one table per user record type"""

import uuid
from sqlalchemy import Boolean, Column, Date, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class BankAccountRecord(Base):
    """Bank, cash or card account"""

    __tablename__ = "bank_accounts"

    id = Column(String(64), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    balance = Column(Float, nullable=False, default=0.0)
    is_active = Column(Boolean, nullable=False, default=True)
    has_overdraft = Column(Boolean, nullable=False, default=False)
    overdraft_limit = Column(Float, nullable=True)
    overdraft_used = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class IncomeRecord(Base):
    __tablename__ = "incomes"

    id = Column(String(64), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    source = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    frequency = Column(Text, nullable=False, default="monthly")
    bank_account_id = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ExpenseRecord(Base):
    __tablename__ = "expenses"

    id = Column(String(64), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    frequency = Column(Text, nullable=False, default="monthly")
    category = Column(Text, nullable=False)  # need | want
    bank_account_id = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class LoanRecord(Base):
    """Installment loan; interest_rate is a monthly percentage"""

    __tablename__ = "loans"

    id = Column(String(64), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    principal = Column(Float, nullable=False)
    current_balance = Column(Float, nullable=False)
    interest_rate = Column(Float, nullable=False, default=0.0)
    minimum_payment = Column(Float, nullable=False, default=0.0)
    due_date = Column(Date, nullable=True)
    lender = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class BillRecord(Base):
    __tablename__ = "bills"

    id = Column(String(64), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    due_date = Column(Date, nullable=False)
    frequency = Column(Text, nullable=False, default="monthly")
    category = Column(Text, nullable=False, default="other")
    is_paid = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class DailyEntryRecord(Base):
    __tablename__ = "daily_entries"

    id = Column(String(64), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    date = Column(Date, nullable=False)
    income = Column(Float, nullable=False, default=0.0)
    expenses = Column(Float, nullable=False, default=0.0)
    category = Column(Text, nullable=True)
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class BusinessEntryRecord(Base):
    __tablename__ = "business_entries"

    id = Column(String(64), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    date = Column(Date, nullable=False)
    sales = Column(Float, nullable=False, default=0.0)
    stock_value = Column(Float, nullable=False, default=0.0)
    profit = Column(Float, nullable=False, default=0.0)
    profit_to_goal = Column(Float, nullable=False, default=0.0)
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class FinancialGoalRecord(Base):
    __tablename__ = "financial_goals"

    id = Column(String(64), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    target_amount = Column(Float, nullable=False)
    current_amount = Column(Float, nullable=False, default=0.0)
    target_date = Column(Date, nullable=False)
    category = Column(Text, nullable=False, default="other")
    priority = Column(Text, nullable=False, default="medium")
    created_on = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ExpectedPaymentRecord(Base):
    __tablename__ = "expected_payments"

    id = Column(String(64), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    type = Column(Text, nullable=False)  # income | expense
    name = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    expected_date = Column(Date, nullable=False)
    is_paid = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class UserPreferencesRecord(Base):
    """Per-user engine configuration"""

    __tablename__ = "user_preferences"

    user_id = Column(Text, primary_key=True)
    strategy = Column(Text, nullable=False, default="balanced")
    risk_tolerance = Column(Text, nullable=False, default="moderate")
    emergency_fund_months = Column(Integer, nullable=False, default=6)
    auto_allocate = Column(Boolean, nullable=False, default=True)
    reminder_time = Column(Text, nullable=False, default="09:00")
    currency = Column(Text, nullable=False, default="KES")
    debt_strategy = Column(Text, nullable=True)
    auto_suggest_strategy = Column(Boolean, nullable=False, default=False)


class ChallengeRecord(Base):
    """Gamification challenge keyed per user; loan_id/goal_id point at the tracked record"""

    __tablename__ = "user_challenges"

    user_id = Column(String(64), primary_key=True)
    id = Column(String(128), primary_key=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    target = Column(Float, nullable=False)
    current = Column(Float, nullable=False, default=0.0)
    points = Column(Integer, nullable=False)
    deadline = Column(Date, nullable=False)
    difficulty = Column(Text, nullable=False)
    is_completed = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    loan_id = Column(String(64), nullable=True)
    goal_id = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class UserProgressRecord(Base):
    __tablename__ = "user_progress"

    user_id = Column(Text, primary_key=True)
    total_points = Column(Integer, nullable=False, default=0)
    level = Column(Integer, nullable=False, default=1)
    current_level_points = Column(Integer, nullable=False, default=0)
    next_level_points = Column(Integer, nullable=False, default=100)
    streak = Column(Integer, nullable=False, default=0)
    longest_streak = Column(Integer, nullable=False, default=0)
    challenges_completed = Column(Integer, nullable=False, default=0)
    achievements_unlocked = Column(Integer, nullable=False, default=0)
    financial_health_improvement = Column(Integer, nullable=False, default=0)
    last_activity_date = Column(Date, nullable=True)

"""Named business rules shared by the derivation engine.

Every heuristic figure the calculators rely on lives here so it can be
audited and tested in isolation instead of being re-derived per function.
"""

# Frequency -> monthly multipliers (average weeks per month, not calendar exact)
WEEKLY_PER_MONTH = 4.33
BIWEEKLY_PER_MONTH = 2.17
MONTHS_PER_YEAR = 12

# Account debt minimum payments
ACCOUNT_MIN_PAYMENT_RATE = 0.05
ACCOUNT_MIN_PAYMENT_FLOOR = 25  # negative-balance component only
OVERDRAFT_MIN_PAYMENT_RATE = 0.05

# Account debt handling in the allocation engine
ACCOUNT_DEBT_ALLOCATION_RATE = 0.10
OVERDRAFT_ALLOCATION_RATE = 0.20

# Account debt handling in the debt strategy engine
ACCOUNT_DEBT_SUGGESTED_RATE = 0.10
ACCOUNT_DEBT_SUGGESTED_FLOOR = 50
ACCOUNT_DEBT_PAYOFF_MONTHS = 10
ACCOUNT_DEBT_FEE_ESTIMATE = 0.20

# Debt payoff projection
NEVER_PAYOFF_MONTHS = 999
NEVER_PAYOFF_INTEREST_MULTIPLIER = 2
HYBRID_RATE_WEIGHT = 0.7
HYBRID_BALANCE_WEIGHT = 0.3
HYBRID_BALANCE_SCALE = 1000

# Strategy auto-suggestion
HIGH_INTEREST_RATE = 15
HIGH_AVERAGE_INTEREST_RATE = 10
SMALL_DEBT_INCOME_SHARE = 0.5
LOW_ENGAGEMENT_ENTRIES = 10

# Emergency fund target in months of burn
EMERGENCY_FUND_MONTHS = 6

# Trailing windows
BUSINESS_WINDOW_DAYS = 30
DAYS_PER_MONTH = 30

# 50/30/20 heuristic: share of income available for wants
WANTS_INCOME_SHARE = 0.30
LOW_ALLOWANCE_SHARE = 0.20
HIGH_DEBT_INCOME_MULTIPLE = 3

# Health level thresholds (score >= threshold)
HEALTH_LEVELS = (
    (80, "excellent"),
    (60, "good"),
    (40, "fair"),
)

# Goal status offsets in percentage points from elapsed time
GOAL_AHEAD_OFFSET = 10
GOAL_ON_TRACK_OFFSET = -10
GOAL_BEHIND_OFFSET = -25

# Gamification level thresholds in points
LEVEL_THRESHOLDS = (0, 100, 250, 500, 1000, 1500, 2500, 4000, 6000, 9000, 13000)
LEVEL_OVERFLOW_MULTIPLIER = 1.5

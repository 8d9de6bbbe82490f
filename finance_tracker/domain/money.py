"""Monetary normalization: frequency conversion and currency display"""

from dataclasses import dataclass
from typing import Dict
from finance_tracker.domain.rules import WEEKLY_PER_MONTH, BIWEEKLY_PER_MONTH, MONTHS_PER_YEAR


@dataclass(frozen=True)
class Currency:
    """Display metadata for a currency"""

    code: str
    symbol: str
    name: str


DEFAULT_CURRENCIES: Dict[str, Currency] = {
    "KES": Currency(code="KES", symbol="KSh", name="Kenyan Shilling"),
    "USD": Currency(code="USD", symbol="$", name="US Dollar"),
    "EUR": Currency(code="EUR", symbol="€", name="Euro"),
    "GBP": Currency(code="GBP", symbol="£", name="British Pound"),
}

DEFAULT_CURRENCY = DEFAULT_CURRENCIES["KES"]


def monthly_amount(amount: float, frequency: str) -> float:
    """
    Convert an amount paid at `frequency` into its monthly equivalent.

    Multipliers are average occurrences per month, not calendar exact:
    - weekly:   x 4.33
    - biweekly: x 2.17
    - monthly:  x 1
    - yearly:   / 12

    Unrecognized frequencies are treated as already monthly.
    """
    if frequency == "weekly":
        return amount * WEEKLY_PER_MONTH
    if frequency == "biweekly":
        return amount * BIWEEKLY_PER_MONTH
    if frequency == "yearly":
        return amount / MONTHS_PER_YEAR
    return amount


def get_currency(code: str | None) -> Currency:
    """Look up a known currency, falling back to a bare code display"""
    if not code:
        return DEFAULT_CURRENCY
    code = code.upper()
    return DEFAULT_CURRENCIES.get(code, Currency(code=code, symbol=code, name=code))


def format_currency(amount: float, currency: Currency = DEFAULT_CURRENCY) -> str:
    """
    Canonical amount display: symbol, thousands separators, no decimals.

    Example:
        -1234.6 KES -> "-KSh 1,235"
    """
    formatted = f"{currency.symbol} {abs(amount):,.0f}"
    return f"-{formatted}" if amount < 0 else formatted


def percentage_change(current: float, previous: float) -> float:
    """Percent change from previous to current, safe for a zero baseline"""
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / abs(previous) * 100

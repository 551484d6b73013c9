"""
Time-series helpers: period parsing, periodicity conversion and period returns.
"""

from tqkit.timeseries.period_parser import Period, parse_period, validate_period, list_periods
from tqkit.timeseries.periods import (
    to_period,
    to_daily,
    to_weekly,
    to_monthly,
    to_quarterly,
    to_yearly,
    period_return,
    daily_return,
    weekly_return,
    monthly_return,
    quarterly_return,
    yearly_return,
    all_returns,
)

__all__ = [
    'Period',
    'parse_period',
    'validate_period',
    'list_periods',
    'to_period',
    'to_daily',
    'to_weekly',
    'to_monthly',
    'to_quarterly',
    'to_yearly',
    'period_return',
    'daily_return',
    'weekly_return',
    'monthly_return',
    'quarterly_return',
    'yearly_return',
    'all_returns',
]

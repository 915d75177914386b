"""Calculator modules for the report engine."""

from crewtime.calculators.live_hours_calculator import (
    calculate_live_hours,
    total_live_hours,
)
from crewtime.calculators.overtime_calculator import (
    DEFAULT_OVERTIME_THRESHOLD,
    MONTH_AGGREGATE,
    SUM_OF_PERIODS,
    OvertimeSplit,
    monthly_overtime,
    split_overtime,
)
from crewtime.calculators.pay_period_calculator import (
    day_window,
    monday_of,
    month_name,
    month_window,
    pay_period_for,
    saturday_of,
    today_window,
    week_window,
)
from crewtime.calculators.time_utils import (
    duration_hours,
    entry_hours,
    hours_between,
    round_hours,
)

__all__ = [
    # live_hours_calculator
    "calculate_live_hours",
    "total_live_hours",
    # overtime_calculator
    "DEFAULT_OVERTIME_THRESHOLD",
    "MONTH_AGGREGATE",
    "SUM_OF_PERIODS",
    "OvertimeSplit",
    "monthly_overtime",
    "split_overtime",
    # pay_period_calculator
    "day_window",
    "monday_of",
    "month_name",
    "month_window",
    "pay_period_for",
    "saturday_of",
    "today_window",
    "week_window",
    # time_utils
    "duration_hours",
    "entry_hours",
    "hours_between",
    "round_hours",
]

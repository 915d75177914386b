"""Regular/overtime split for weekly and monthly reports.

Overtime is every hour past the threshold (40 by default) within one pay
period. Daily reports never split overtime.

The employee-level figure of a monthly report is routed through
``monthly_overtime`` so its policy can be changed in one place:

- ``month_aggregate``: the threshold is applied to the whole month's total,
  as the crew app always has. An employee working 35 hours in each of four
  weeks shows 100 overtime hours.
- ``sum_of_periods``: overtime is the sum of each pay period's overtime,
  which agrees with the pay period breakdown.
"""

from dataclasses import dataclass
from typing import Iterable

from crewtime.calculators.time_utils import round_hours

DEFAULT_OVERTIME_THRESHOLD = 40.0

MONTH_AGGREGATE = "month_aggregate"
SUM_OF_PERIODS = "sum_of_periods"


@dataclass(frozen=True)
class OvertimeSplit:
    """Rounded hour figures for one employee in one period.

    Attributes:
        regular_hours: Hours up to the threshold
        overtime_hours: Hours past the threshold
        total_hours: All hours
        has_overtime: True when total exceeds the threshold
    """

    regular_hours: float
    overtime_hours: float
    total_hours: float
    has_overtime: bool


def split_overtime(
    total_hours: float, threshold: float = DEFAULT_OVERTIME_THRESHOLD
) -> OvertimeSplit:
    """Split a period total into regular and overtime hours.

    The total is rounded first and the split is taken from the rounded
    value, so regular + overtime always equals the displayed total and
    ``has_overtime`` agrees with it.

    Args:
        total_hours: Unrounded hours worked in the period
        threshold: Weekly overtime threshold

    Returns:
        OvertimeSplit with every figure rounded to 2 decimals

    Example:
        >>> split_overtime(45.0)
        OvertimeSplit(regular_hours=40.0, overtime_hours=5.0, total_hours=45.0, has_overtime=True)
        >>> split_overtime(40.0).has_overtime
        False
    """
    total = round_hours(total_hours)
    return OvertimeSplit(
        regular_hours=round_hours(min(total, threshold)),
        overtime_hours=round_hours(max(total - threshold, 0.0)),
        total_hours=total,
        has_overtime=total > threshold,
    )


def monthly_overtime(
    month_total: float,
    period_totals: Iterable[float],
    threshold: float = DEFAULT_OVERTIME_THRESHOLD,
    policy: str = MONTH_AGGREGATE,
) -> OvertimeSplit:
    """Compute the employee-level overtime split of a monthly report.

    Args:
        month_total: Unrounded hours of the employee in the month
        period_totals: Unrounded hours of the employee in each pay period
        threshold: Weekly overtime threshold
        policy: MONTH_AGGREGATE or SUM_OF_PERIODS

    Returns:
        OvertimeSplit for the whole month

    Raises:
        ValueError: If the policy is unknown
    """
    if policy == MONTH_AGGREGATE:
        return split_overtime(month_total, threshold)

    if policy == SUM_OF_PERIODS:
        total = round_hours(month_total)
        overtime = round_hours(
            sum(split_overtime(hours, threshold).overtime_hours for hours in period_totals)
        )
        return OvertimeSplit(
            regular_hours=round_hours(total - overtime),
            overtime_hours=overtime,
            total_hours=total,
            has_overtime=overtime > 0,
        )

    raise ValueError(
        f"Unknown monthly overtime policy: {policy}. "
        f"Expected {MONTH_AGGREGATE} or {SUM_OF_PERIODS}"
    )

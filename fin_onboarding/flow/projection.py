"""Savings projection shown on the summary page."""

from dataclasses import dataclass
from decimal import Decimal

# (max months to goal, success rate %), checked in order
SUCCESS_RATE_BUCKETS = [
    (12, 95),
    (24, 85),
    (36, 75),
    (60, 65),
]
FALLBACK_SUCCESS_RATE = 50


@dataclass
class ProjectionPoint:
    """One month of projected savings."""

    month: int
    amount: Decimal
    progress: Decimal  # percent of the budget goal, capped at 100
    goal_reached: bool


def monthly_savings(income: Decimal, expenses: Decimal) -> Decimal:
    return max(Decimal("0"), income - expenses)


def months_to_goal(income: Decimal, expenses: Decimal, goal: Decimal) -> Decimal | None:
    """Months of saving needed to reach ``goal``.

    Returns ``0`` when there is no goal and ``None`` when the goal can never
    be reached (nothing is saved each month).
    """
    if goal <= 0:
        return Decimal("0")

    savings = monthly_savings(income, expenses)
    if savings == 0:
        return None
    return goal / savings


def success_rate(income: Decimal, expenses: Decimal, goal: Decimal) -> int:
    """Percentage chance of reaching the goal, bucketed by months to goal."""
    months = months_to_goal(income, expenses, goal)
    if months is None:
        return FALLBACK_SUCCESS_RATE

    for limit, rate in SUCCESS_RATE_BUCKETS:
        if months <= limit:
            return rate
    return FALLBACK_SUCCESS_RATE


def project_savings(
    income: Decimal,
    expenses: Decimal,
    goal: Decimal,
    months: int = 12,
) -> list[ProjectionPoint]:
    """Accumulated savings for each of the next ``months`` months."""
    savings = monthly_savings(income, expenses)
    points = []
    amount = Decimal("0")

    for month in range(1, months + 1):
        amount += savings
        if goal > 0:
            progress = min(amount / goal, Decimal("1")) * 100
        else:
            progress = Decimal("100")
        points.append(
            ProjectionPoint(
                month=month,
                amount=amount,
                progress=progress,
                goal_reached=amount >= goal,
            )
        )

    return points

"""Debt payoff simulator - snowball vs avalanche month-by-month schedules"""

import logging
from datetime import date
from typing import Iterable, List, Tuple

from cashflow_planner.domain.amortization import (
    MINIMUM_PAYMENT_FLOOR_PCT,
    allocate_payments,
    minimum_obligation,
    monthly_interest,
)
from cashflow_planner.domain.exceptions import InvalidStrategyError
from cashflow_planner.domain.models import (
    Debt,
    DebtPayment,
    PayoffPlan,
    PayoffProjection,
    PayoffStrategy,
    PayoffSummary,
    ScheduleMonth,
    StrategyComparison,
)
from cashflow_planner.utils.date_utils import add_months

logger = logging.getLogger(__name__)

# Safety horizon: 50 years
MAX_PAYOFF_MONTHS = 600


def resolve_strategy(strategy: PayoffStrategy | str) -> PayoffStrategy:
    """Fail fast on unknown strategies instead of silently picking one"""
    try:
        return PayoffStrategy(strategy)
    except ValueError as e:
        raise InvalidStrategyError(f"Unknown payoff strategy: {strategy!r}") from e


def order_debts(debts: Iterable[Debt], strategy: PayoffStrategy | str) -> List[Debt]:
    """
    Priority order for surplus payments.

    - snowball:  smallest balance first
    - avalanche: highest interest rate first

    Ties keep the caller's order.
    """
    strategy = resolve_strategy(strategy)
    if strategy is PayoffStrategy.SNOWBALL:
        return sorted(debts, key=lambda d: d.balance_cents)
    return sorted(debts, key=lambda d: d.interest_rate, reverse=True)


def default_base_payment(debts: Iterable[Debt]) -> int:
    """What the caller pays today: each debt's chosen payment, or its minimum"""
    return sum(d.monthly_payment_cents or d.minimum_payment_cents for d in debts)


def generate_payoff_schedule(
    debts: List[Debt],
    extra_payment_cents: int = 0,
    base_monthly_payment_cents: int = 0,
    start_date: date | None = None,
    max_months: int = MAX_PAYOFF_MONTHS,
    floor_pct: float = MINIMUM_PAYMENT_FLOOR_PCT,
) -> Tuple[List[ScheduleMonth], List[int]]:
    """
    Simulate month by month until every balance is zero or `max_months` pass.

    Each month's budget is max(base payment, sum of minimum obligations) plus
    the extra payment. Because the base stays fixed, a cleared debt's
    payment capacity rolls into the next debt in priority order.

    Args:
        debts: Debts already in priority order (not mutated)
        start_date: Month 1 is dated one month after this (default: today)

    Returns:
        (schedule, final balances aligned with `debts`)
    """
    if start_date is None:
        start_date = date.today()

    balances = [max(0, d.balance_cents) for d in debts]
    schedule: List[ScheduleMonth] = []
    month_index = 0

    while any(b > 0 for b in balances) and month_index < max_months:
        month_index += 1

        obligations = sum(
            minimum_obligation(balance, debt.interest_rate, debt.minimum_payment_cents, floor_pct)
            for debt, balance in zip(debts, balances)
            if balance > 0
        )
        budget = max(base_monthly_payment_cents, obligations) + extra_payment_cents

        splits = allocate_payments(debts, balances, budget, floor_pct)

        payments = []
        for i, (debt, split) in enumerate(zip(debts, splits)):
            balances[i] -= split.principal_cents
            if split.total_cents > 0:
                payments.append(
                    DebtPayment(
                        debt_id=debt.id,
                        debt_name=debt.name,
                        principal_cents=split.principal_cents,
                        interest_cents=split.interest_cents,
                        total_paid_cents=split.total_cents,
                        remaining_balance_cents=balances[i],
                    )
                )

        # Only months with an actual payment are recorded
        if payments:
            schedule.append(
                ScheduleMonth(
                    month_index=month_index,
                    date=add_months(start_date, month_index),
                    payments=payments,
                    aggregate_remaining_balance_cents=sum(balances),
                    aggregate_interest_cents=sum(p.interest_cents for p in payments),
                )
            )

    return schedule, balances


def simulate_payoff(
    debts: Iterable[Debt],
    strategy: PayoffStrategy | str,
    extra_payment_cents: int = 0,
    base_monthly_payment_cents: int | None = None,
    start_date: date | None = None,
    max_months: int = MAX_PAYOFF_MONTHS,
    floor_pct: float = MINIMUM_PAYMENT_FLOOR_PCT,
) -> PayoffPlan:
    """
    Main entry point: payoff plan for a set of debts under one strategy.

    `base_monthly_payment_cents` defaults to the sum of each debt's current
    monthly payment. A plan that cannot clear the debts within `max_months`
    comes back with paid_off=False and the balance still owed.

    Raises:
        InvalidStrategyError: strategy is not snowball or avalanche
    """
    strategy = resolve_strategy(strategy)
    ordered = order_debts(debts, strategy)
    if base_monthly_payment_cents is None:
        base_monthly_payment_cents = default_base_payment(ordered)

    schedule, balances = generate_payoff_schedule(
        ordered,
        extra_payment_cents=extra_payment_cents,
        base_monthly_payment_cents=base_monthly_payment_cents,
        start_date=start_date,
        max_months=max_months,
        floor_pct=floor_pct,
    )

    final_balance = sum(balances)
    if final_balance > 0:
        logger.warning(
            f"Payoff plan hit the {max_months}-month safety cap",
            extra={"strategy": strategy.value, "final_balance_cents": final_balance},
        )

    return PayoffPlan(
        strategy=strategy,
        debts=ordered,
        extra_payment_cents=extra_payment_cents,
        schedule=schedule,
        total_interest_paid_cents=sum(m.aggregate_interest_cents for m in schedule),
        months_to_payoff=len(schedule),
        paid_off=final_balance == 0,
        final_balance_cents=final_balance,
    )


def calculate_snowball_payoff(
    debts: Iterable[Debt],
    extra_payment_cents: int = 0,
    base_monthly_payment_cents: int | None = None,
    start_date: date | None = None,
    max_months: int = MAX_PAYOFF_MONTHS,
    floor_pct: float = MINIMUM_PAYMENT_FLOOR_PCT,
) -> PayoffPlan:
    """Pay off the smallest balance first"""
    return simulate_payoff(
        debts,
        PayoffStrategy.SNOWBALL,
        extra_payment_cents,
        base_monthly_payment_cents,
        start_date,
        max_months,
        floor_pct,
    )


def calculate_avalanche_payoff(
    debts: Iterable[Debt],
    extra_payment_cents: int = 0,
    base_monthly_payment_cents: int | None = None,
    start_date: date | None = None,
    max_months: int = MAX_PAYOFF_MONTHS,
    floor_pct: float = MINIMUM_PAYMENT_FLOOR_PCT,
) -> PayoffPlan:
    """Pay off the highest interest rate first"""
    return simulate_payoff(
        debts,
        PayoffStrategy.AVALANCHE,
        extra_payment_cents,
        base_monthly_payment_cents,
        start_date,
        max_months,
        floor_pct,
    )


def compare_payoff_strategies(
    debts: Iterable[Debt],
    extra_payment_cents: int = 0,
    base_monthly_payment_cents: int | None = None,
    start_date: date | None = None,
    max_months: int = MAX_PAYOFF_MONTHS,
    floor_pct: float = MINIMUM_PAYMENT_FLOOR_PCT,
) -> StrategyComparison:
    """Run both strategies on identical inputs; savings = interest avoided by avalanche"""
    debts = list(debts)
    options = (extra_payment_cents, base_monthly_payment_cents, start_date, max_months, floor_pct)
    snowball = calculate_snowball_payoff(debts, *options)
    avalanche = calculate_avalanche_payoff(debts, *options)

    return StrategyComparison(
        snowball=snowball,
        avalanche=avalanche,
        savings_cents=snowball.total_interest_paid_cents - avalanche.total_interest_paid_cents,
    )


def project_payoff_time(
    debt: Debt,
    extra_payment_cents: int = 0,
    max_months: int = MAX_PAYOFF_MONTHS,
) -> PayoffProjection:
    """
    Quick what-if for a single debt: months and interest at the current
    payment (or minimum) plus `extra_payment_cents`.

    No allocation rules or minimum floors; payments below the monthly
    interest never reduce the balance and run into the safety cap.
    """
    balance = max(0, debt.balance_cents)
    payment = (debt.monthly_payment_cents or debt.minimum_payment_cents) + extra_payment_cents
    total_interest = 0
    months = 0

    while balance > 0 and months < max_months:
        months += 1
        interest = monthly_interest(balance, debt.interest_rate)
        total_interest += interest
        balance -= max(0, payment - interest)

    return PayoffProjection(
        months=months,
        total_interest_cents=total_interest,
        paid_off=balance <= 0,
    )


def _format_dollars(cents: float) -> str:
    return f"${cents / 100:,.2f}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count != 1 else ''}"


def format_payoff_schedule(plan: PayoffPlan) -> PayoffSummary:
    """
    Summarize a plan for display.

    Example:
        27 months, $812.40 interest -> "2 years 3 months", "$812.40"
    """
    years, months = divmod(plan.months_to_payoff, 12)

    parts = []
    if years:
        parts.append(_plural(years, "year"))
    if months or not parts:
        parts.append(_plural(months, "month"))

    total_paid = sum(p.total_paid_cents for m in plan.schedule for p in m.payments)
    average_payment = total_paid / len(plan.schedule) if plan.schedule else 0

    return PayoffSummary(
        years_to_payoff=years,
        months_remainder=months,
        duration_text=" ".join(parts),
        total_interest_paid=_format_dollars(plan.total_interest_paid_cents),
        average_monthly_payment=_format_dollars(average_payment),
    )

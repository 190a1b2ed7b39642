"""Debt amortization primitives - interest accrual, minimum payments, payment allocation.

All arithmetic is in integer cents with an explicit rounding step each
month, so hundreds of simulated months never accumulate float drift.
"""

import math
from dataclasses import dataclass
from typing import List

from cashflow_planner.domain.models import Debt

# Floor used when a debt has no stated minimum payment
DEFAULT_MINIMUM_PAYMENT_CENTS = 2_500  # $25

# Minimum principal as a share of the remaining balance
MINIMUM_PAYMENT_FLOOR_PCT = 0.02


@dataclass
class PaymentSplit:
    """Interest and principal paid to one debt in one month"""

    interest_cents: int
    principal_cents: int

    @property
    def total_cents(self) -> int:
        return self.interest_cents + self.principal_cents


def round_cents(value: float) -> int:
    """Round half up to a whole cent (1.5 -> 2, 2.5 -> 3)"""
    return int(math.floor(value + 0.5))


def monthly_interest(balance_cents: int, interest_rate: float) -> int:
    """
    One month of interest on a balance: round(balance x rate / 100 / 12).

    Zero and negative rates accrue nothing (principal-only reduction).
    """
    if balance_cents <= 0 or interest_rate <= 0:
        return 0
    return round_cents(balance_cents * interest_rate / 100 / 12)


def minimum_principal(
    balance_cents: int,
    stated_minimum_cents: int,
    floor_pct: float = MINIMUM_PAYMENT_FLOOR_PCT,
) -> int:
    """
    Principal a debt must receive this month.

    max(stated minimum, 2% of balance); debts without a stated minimum use a
    $25 floor instead. Never more than the balance itself.
    """
    if balance_cents <= 0:
        return 0
    percent_floor = round_cents(balance_cents * floor_pct)
    stated = stated_minimum_cents if stated_minimum_cents > 0 else DEFAULT_MINIMUM_PAYMENT_CENTS
    return min(max(stated, percent_floor), balance_cents)


def minimum_obligation(
    balance_cents: int,
    interest_rate: float,
    stated_minimum_cents: int,
    floor_pct: float = MINIMUM_PAYMENT_FLOOR_PCT,
) -> int:
    """Interest plus minimum principal due this month"""
    return monthly_interest(balance_cents, interest_rate) + minimum_principal(
        balance_cents, stated_minimum_cents, floor_pct
    )


def allocate_payments(
    debts: List[Debt],
    balances: List[int],
    budget_cents: int,
    floor_pct: float = MINIMUM_PAYMENT_FLOOR_PCT,
) -> List[PaymentSplit]:
    """
    Split one month's budget across debts already in priority order.

    1. Each unpaid debt receives its interest + minimum principal.
    2. Whatever is left goes to the highest-priority debt still owing; once
       that one is cleared the rest cascades to the next.

    Principal never exceeds a balance. Interest the budget cannot cover is
    dropped rather than added to the balance, so balances never grow.

    Returns:
        One PaymentSplit per debt, aligned with `debts`
    """
    splits = [PaymentSplit(interest_cents=0, principal_cents=0) for _ in debts]
    remaining = budget_cents

    for debt, balance, split in zip(debts, balances, splits):
        if balance <= 0 or remaining <= 0:
            continue
        interest = monthly_interest(balance, debt.interest_rate)
        due = interest + minimum_principal(balance, debt.minimum_payment_cents, floor_pct)
        paid = min(due, remaining)

        split.interest_cents = min(interest, paid)
        split.principal_cents = min(paid - split.interest_cents, balance)
        remaining -= split.total_cents

    # Surplus rolls to the top-priority debt that still owes principal
    for balance, split in zip(balances, splits):
        if remaining <= 0:
            break
        left = balance - split.principal_cents
        if left <= 0:
            continue
        extra = min(left, remaining)
        split.principal_cents += extra
        remaining -= extra

    return splits

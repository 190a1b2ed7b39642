"""Monthly cash-flow summary combining detected patterns with debts"""

from typing import Iterable

from cashflow_planner.domain.amortization import round_cents
from cashflow_planner.domain.models import CashFlowSummary, Debt, RecurringPattern


def account_health(savings_rate: int, has_income: bool = True) -> str:
    """
    Map savings rate (whole percent) to a health label.

    Bands:
    - 20%+:   excellent
    - 10-20%: good
    - 0-10%:  fair
    - < 0%:   poor (spending more than recurring income)
    """
    if not has_income or savings_rate < 0:
        return "poor"
    elif savings_rate < 10:
        return "fair"
    elif savings_rate < 20:
        return "good"
    else:
        return "excellent"


def summarize_cash_flow(
    expenses: Iterable[RecurringPattern],
    income: Iterable[RecurringPattern],
    debts: Iterable[Debt] = (),
) -> CashFlowSummary:
    """
    Roll detected patterns and debts into monthly figures.

    The available extra payment (net cash flow left after every debt's
    minimum) is what callers feed into the payoff simulator.
    """
    debts = list(debts)
    monthly_income = round_cents(sum(p.monthly_equivalent for p in income) * 100)
    monthly_expenses = round_cents(sum(p.monthly_equivalent for p in expenses) * 100)
    net = monthly_income - monthly_expenses

    savings_rate = round_cents(net / monthly_income * 100) if monthly_income > 0 else 0

    open_debts = [d for d in debts if d.balance_cents > 0]
    total_minimum = sum(d.minimum_payment_cents for d in open_debts)

    return CashFlowSummary(
        monthly_income_cents=monthly_income,
        monthly_expenses_cents=monthly_expenses,
        net_cash_flow_cents=net,
        savings_rate=savings_rate,
        total_debt_cents=sum(d.balance_cents for d in open_debts),
        total_minimum_payment_cents=total_minimum,
        available_extra_payment_cents=max(0, net - total_minimum),
        account_health=account_health(savings_rate, has_income=monthly_income > 0),
    )

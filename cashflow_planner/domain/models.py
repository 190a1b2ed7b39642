"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional


class Frequency(str, Enum):
    """How often a recurring charge or deposit repeats"""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMI_MONTHLY = "semi-monthly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


# Per-occurrence amount -> monthly rate
MONTHLY_MULTIPLIERS = {
    Frequency.WEEKLY: 52 / 12,
    Frequency.BIWEEKLY: 26 / 12,
    Frequency.SEMI_MONTHLY: 2.0,
    Frequency.MONTHLY: 1.0,
    Frequency.QUARTERLY: 1 / 3,
    Frequency.ANNUAL: 1 / 12,
}


class PayoffStrategy(str, Enum):
    """Order in which surplus payment is directed at debts"""

    SNOWBALL = "snowball"  # smallest balance first
    AVALANCHE = "avalanche"  # highest interest rate first


@dataclass
class Transaction:
    """Bank statement line supplied by the caller.

    Every field is optional because uploaded statements are messy; records
    without a date or amount are skipped by the detector.
    A `datetime` is accepted and reduced to its date.
    """

    date: Optional[date]
    description: Optional[str]
    amount_cents: Optional[int]  # negative = outflow
    category: Optional[str] = None

    @property
    def is_well_formed(self) -> bool:
        return self.date is not None and self.amount_cents is not None


@dataclass
class RecurringPattern:
    """A cluster of transactions that repeat on a schedule"""

    description: str
    category: str
    occurrence_count: int
    average_amount: float  # major units, positive
    total_amount: float
    last_occurrence: date
    estimated_frequency: Frequency

    @property
    def monthly_equivalent(self) -> float:
        """Per-occurrence amount normalized to a monthly rate"""
        return self.average_amount * MONTHLY_MULTIPLIERS[self.estimated_frequency]


@dataclass
class DetectionOptions:
    """Tuning knobs for the pattern detector"""

    amount_bucket_cents: int = 5
    max_amount_variation: float = 0.10  # coefficient of variation
    min_vendor_token_share: float = 0.5
    default_min_occurrences: int = 3
    high_confidence_min_occurrences: int = 2
    income_min_occurrences: int = 2
    stale_after_months: int = 6


@dataclass
class DetectionResult:
    """Expense and income patterns found in one transaction set"""

    expenses: List[RecurringPattern] = field(default_factory=list)
    income: List[RecurringPattern] = field(default_factory=list)

    @property
    def monthly_expenses(self) -> float:
        return sum(p.monthly_equivalent for p in self.expenses)

    @property
    def monthly_income(self) -> float:
        return sum(p.monthly_equivalent for p in self.income)


@dataclass
class UndetectedCharge:
    """Repeated same-amount outflow the detector did not accept"""

    description: str
    amount: float  # major units, negative like the source transactions
    count: int
    last_occurrence: date
    category: str
    transactions: List[Transaction]


@dataclass(frozen=True)
class Debt:
    """Debt account supplied by the caller (never mutated by the simulator)"""

    id: str
    name: str
    balance_cents: int
    interest_rate: float  # annual percentage, e.g. 19.99
    minimum_payment_cents: int
    monthly_payment_cents: int = 0


@dataclass
class DebtPayment:
    """What one debt received in one simulated month"""

    debt_id: str
    debt_name: str
    principal_cents: int
    interest_cents: int
    total_paid_cents: int
    remaining_balance_cents: int


@dataclass
class ScheduleMonth:
    """Single month of a payoff schedule"""

    month_index: int  # 1-based
    date: date
    payments: List[DebtPayment]
    aggregate_remaining_balance_cents: int
    aggregate_interest_cents: int


@dataclass
class PayoffPlan:
    """Output of the payoff simulator"""

    strategy: PayoffStrategy
    debts: List[Debt]  # in strategy order
    extra_payment_cents: int
    schedule: List[ScheduleMonth]
    total_interest_paid_cents: int
    months_to_payoff: int
    paid_off: bool
    final_balance_cents: int


@dataclass
class StrategyComparison:
    """Snowball vs avalanche on identical inputs"""

    snowball: PayoffPlan
    avalanche: PayoffPlan
    savings_cents: int  # interest saved by choosing avalanche


@dataclass
class PayoffProjection:
    """Single-debt payoff estimate"""

    months: int
    total_interest_cents: int
    paid_off: bool


@dataclass
class PayoffSummary:
    """Human-readable digest of a payoff plan"""

    years_to_payoff: int
    months_remainder: int
    duration_text: str
    total_interest_paid: str
    average_monthly_payment: str


@dataclass
class CashFlowSummary:
    """Monthly cash flow derived from detected patterns and debts"""

    monthly_income_cents: int
    monthly_expenses_cents: int
    net_cash_flow_cents: int
    savings_rate: int  # whole percent
    total_debt_cents: int
    total_minimum_payment_cents: int
    available_extra_payment_cents: int
    account_health: str

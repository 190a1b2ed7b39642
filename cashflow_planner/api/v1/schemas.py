"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
import datetime as dt
from typing import List, Optional


class TransactionSchema(BaseModel):
    """Statement line; date or amount may be missing and is then skipped"""

    date: Optional[dt.date] = None
    description: Optional[str] = None
    amount_cents: Optional[int] = Field(None, description="Signed amount in cents, negative = outflow")
    category: Optional[str] = None


class IgnoredExpenseSchema(BaseModel):
    """Recurring expense the user dismissed"""

    description: str
    amount: float


class DetectionRequest(BaseModel):
    """Request body for POST /v1/patterns/detect"""

    transactions: List[TransactionSchema]
    current_date: Optional[dt.date] = Field(None, description="Reference date for staleness (default: today)")
    ignored: List[IgnoredExpenseSchema] = []


class PatternSchema(BaseModel):
    """Recurring expense or income pattern"""

    description: str
    category: str
    occurrence_count: int
    average_amount: float
    total_amount: float
    last_occurrence: dt.date
    estimated_frequency: str
    monthly_equivalent: float


class UndetectedChargeSchema(BaseModel):
    """Repeated same-amount charge the detector did not accept"""

    description: str
    amount: float
    count: int
    last_occurrence: dt.date
    category: str


class DetectionResponse(BaseModel):
    """Response for POST /v1/patterns/detect"""

    expenses: List[PatternSchema]
    income: List[PatternSchema]
    undetected: List[UndetectedChargeSchema]
    monthly_expenses: float
    monthly_income: float


class DebtSchema(BaseModel):
    """Debt account"""

    id: str = Field(..., min_length=1)
    name: str
    balance_cents: int = Field(..., ge=0)
    interest_rate: float = Field(..., description="Annual percentage, e.g. 19.99")
    minimum_payment_cents: int = Field(0, ge=0)
    monthly_payment_cents: int = Field(0, ge=0)


class PayoffRequest(BaseModel):
    """Request body for POST /v1/payoff/plan and /v1/payoff/compare"""

    debts: List[DebtSchema]
    strategy: str = "avalanche"
    extra_payment_cents: int = Field(0, ge=0)
    base_monthly_payment_cents: Optional[int] = Field(None, ge=0)
    start_date: Optional[dt.date] = None


class DebtPaymentSchema(BaseModel):
    """Single debt's payment in one month"""

    debt_id: str
    debt_name: str
    principal_cents: int
    interest_cents: int
    total_paid_cents: int
    remaining_balance_cents: int


class ScheduleMonthSchema(BaseModel):
    """Single month of a payoff schedule"""

    month_index: int
    date: dt.date
    payments: List[DebtPaymentSchema]
    aggregate_remaining_balance_cents: int
    aggregate_interest_cents: int


class PayoffPlanResponse(BaseModel):
    """Response for POST /v1/payoff/plan"""

    strategy: str
    debt_order: List[str]
    extra_payment_cents: int
    schedule: List[ScheduleMonthSchema]
    total_interest_paid_cents: int
    months_to_payoff: int
    paid_off: bool
    final_balance_cents: int
    duration_text: str
    average_monthly_payment: str


class ComparisonResponse(BaseModel):
    """Response for POST /v1/payoff/compare"""

    snowball: PayoffPlanResponse
    avalanche: PayoffPlanResponse
    savings_cents: int


class ProjectionRequest(BaseModel):
    """Request body for POST /v1/payoff/projection"""

    debt: DebtSchema
    extra_payment_cents: int = Field(0, ge=0)


class ProjectionResponse(BaseModel):
    """Response for POST /v1/payoff/projection"""

    months: int
    total_interest_cents: int
    paid_off: bool


class CashFlowRequest(BaseModel):
    """Request body for POST /v1/cashflow/summary"""

    transactions: List[TransactionSchema]
    debts: List[DebtSchema] = []
    current_date: Optional[dt.date] = None
    strategy: Optional[str] = Field(None, description="Also simulate payoff with the available surplus")


class CashFlowResponse(BaseModel):
    """Response for POST /v1/cashflow/summary"""

    monthly_income_cents: int
    monthly_expenses_cents: int
    net_cash_flow_cents: int
    savings_rate: int
    total_debt_cents: int
    total_minimum_payment_cents: int
    available_extra_payment_cents: int
    account_health: str
    payoff: Optional[PayoffPlanResponse] = None

"""POST /v1/payoff/* - debt payoff plans, strategy comparison and single-debt projection"""

import time
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from cashflow_planner.api.v1.schemas import (
    ComparisonResponse,
    DebtPaymentSchema,
    DebtSchema,
    PayoffPlanResponse,
    PayoffRequest,
    ProjectionRequest,
    ProjectionResponse,
    ScheduleMonthSchema,
)
from cashflow_planner.api.dependencies import (
    get_max_payoff_months,
    get_minimum_payment_floor_pct,
    get_request_id,
)
from cashflow_planner.domain.exceptions import InvalidStrategyError
from cashflow_planner.domain.models import Debt, PayoffPlan
from cashflow_planner.domain.payoff import (
    compare_payoff_strategies,
    format_payoff_schedule,
    project_payoff_time,
    simulate_payoff,
)
from cashflow_planner.infrastructure.observability.metrics import record_payoff_plan
from cashflow_planner.infrastructure.observability.logging import log_payoff_plan, log_payoff_projection

router = APIRouter()


def to_debt(item: DebtSchema) -> Debt:
    return Debt(
        id=item.id,
        name=item.name,
        balance_cents=item.balance_cents,
        interest_rate=item.interest_rate,
        minimum_payment_cents=item.minimum_payment_cents,
        monthly_payment_cents=item.monthly_payment_cents,
    )


def to_debts(items: List[DebtSchema]) -> List[Debt]:
    return [to_debt(item) for item in items]


def to_plan_response(plan: PayoffPlan) -> PayoffPlanResponse:
    """Flatten a domain plan plus its display summary"""
    summary = format_payoff_schedule(plan)
    return PayoffPlanResponse(
        strategy=plan.strategy.value,
        debt_order=[d.id for d in plan.debts],
        extra_payment_cents=plan.extra_payment_cents,
        schedule=[
            ScheduleMonthSchema(
                month_index=month.month_index,
                date=month.date,
                payments=[
                    DebtPaymentSchema(
                        debt_id=p.debt_id,
                        debt_name=p.debt_name,
                        principal_cents=p.principal_cents,
                        interest_cents=p.interest_cents,
                        total_paid_cents=p.total_paid_cents,
                        remaining_balance_cents=p.remaining_balance_cents,
                    )
                    for p in month.payments
                ],
                aggregate_remaining_balance_cents=month.aggregate_remaining_balance_cents,
                aggregate_interest_cents=month.aggregate_interest_cents,
            )
            for month in plan.schedule
        ],
        total_interest_paid_cents=plan.total_interest_paid_cents,
        months_to_payoff=plan.months_to_payoff,
        paid_off=plan.paid_off,
        final_balance_cents=plan.final_balance_cents,
        duration_text=summary.duration_text,
        average_monthly_payment=summary.average_monthly_payment,
    )


def _observe(request_id: str, plan: PayoffPlan, start_time: float) -> None:
    duration_ms = (time.time() - start_time) * 1000
    record_payoff_plan(plan.strategy.value, plan.months_to_payoff, plan.paid_off)
    log_payoff_plan(
        request_id, plan.strategy.value, len(plan.debts), plan.months_to_payoff, plan.paid_off, duration_ms
    )


@router.post("/payoff/plan", response_model=PayoffPlanResponse)
def create_payoff_plan(
    request_body: PayoffRequest,
    request: Request,
    max_months: int = Depends(get_max_payoff_months),
    floor_pct: float = Depends(get_minimum_payment_floor_pct),
):
    """
    Simulate month-by-month payoff under one strategy.

    A plan that hits the safety cap is still returned (paid_off=false) so
    the caller can show "this plan does not pay off the debt".
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        plan = simulate_payoff(
            to_debts(request_body.debts),
            request_body.strategy,
            extra_payment_cents=request_body.extra_payment_cents,
            base_monthly_payment_cents=request_body.base_monthly_payment_cents,
            start_date=request_body.start_date,
            max_months=max_months,
            floor_pct=floor_pct,
        )
        _observe(request_id, plan, start_time)
        return to_plan_response(plan)

    except InvalidStrategyError as e:
        logging.warning(f"Invalid strategy: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/payoff/compare", response_model=ComparisonResponse)
def compare_strategies(
    request_body: PayoffRequest,
    request: Request,
    max_months: int = Depends(get_max_payoff_months),
    floor_pct: float = Depends(get_minimum_payment_floor_pct),
):
    """Snowball vs avalanche on the same debts; `strategy` in the body is ignored"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        comparison = compare_payoff_strategies(
            to_debts(request_body.debts),
            extra_payment_cents=request_body.extra_payment_cents,
            base_monthly_payment_cents=request_body.base_monthly_payment_cents,
            start_date=request_body.start_date,
            max_months=max_months,
            floor_pct=floor_pct,
        )
        _observe(request_id, comparison.snowball, start_time)
        _observe(request_id, comparison.avalanche, start_time)

        return ComparisonResponse(
            snowball=to_plan_response(comparison.snowball),
            avalanche=to_plan_response(comparison.avalanche),
            savings_cents=comparison.savings_cents,
        )

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/payoff/projection", response_model=ProjectionResponse)
def project(
    request_body: ProjectionRequest,
    request: Request,
    max_months: int = Depends(get_max_payoff_months),
):
    """What-if payoff time for one debt with an extra monthly payment"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        projection = project_payoff_time(
            to_debt(request_body.debt),
            extra_payment_cents=request_body.extra_payment_cents,
            max_months=max_months,
        )
        duration_ms = (time.time() - start_time) * 1000
        log_payoff_projection(request_id, projection.months, projection.paid_off, duration_ms)

        return ProjectionResponse(
            months=projection.months,
            total_interest_cents=projection.total_interest_cents,
            paid_off=projection.paid_off,
        )

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

"""POST /v1/cashflow/summary - monthly income vs expenses and surplus for debt payoff"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from cashflow_planner.api.v1.schemas import CashFlowRequest, CashFlowResponse
from cashflow_planner.api.v1.patterns import to_transactions
from cashflow_planner.api.v1.payoff import to_debts, to_plan_response
from cashflow_planner.api.dependencies import (
    get_detection_options,
    get_max_payoff_months,
    get_minimum_payment_floor_pct,
    get_request_id,
)
from cashflow_planner.domain.cashflow import summarize_cash_flow
from cashflow_planner.domain.detector import detect_patterns
from cashflow_planner.domain.exceptions import InvalidStrategyError
from cashflow_planner.domain.models import DetectionOptions
from cashflow_planner.domain.payoff import simulate_payoff

router = APIRouter()


@router.post("/cashflow/summary", response_model=CashFlowResponse)
def cash_flow_summary(
    request_body: CashFlowRequest,
    request: Request,
    options: DetectionOptions = Depends(get_detection_options),
    max_months: int = Depends(get_max_payoff_months),
    floor_pct: float = Depends(get_minimum_payment_floor_pct),
):
    """
    Dashboard figures from raw transactions and debts.

    Flow:
    1. Detect recurring expenses and income
    2. Net monthly income minus expenses and debt minimums = available extra payment
    3. Optionally simulate payoff with that extra payment under `strategy`
    """
    request_id = get_request_id(request)

    try:
        debts = to_debts(request_body.debts)
        result = detect_patterns(to_transactions(request_body.transactions), request_body.current_date, options)
        summary = summarize_cash_flow(result.expenses, result.income, debts)

        payoff = None
        if request_body.strategy is not None and debts:
            plan = simulate_payoff(
                debts,
                request_body.strategy,
                extra_payment_cents=summary.available_extra_payment_cents,
                start_date=request_body.current_date,
                max_months=max_months,
                floor_pct=floor_pct,
            )
            payoff = to_plan_response(plan)

        return CashFlowResponse(
            monthly_income_cents=summary.monthly_income_cents,
            monthly_expenses_cents=summary.monthly_expenses_cents,
            net_cash_flow_cents=summary.net_cash_flow_cents,
            savings_rate=summary.savings_rate,
            total_debt_cents=summary.total_debt_cents,
            total_minimum_payment_cents=summary.total_minimum_payment_cents,
            available_extra_payment_cents=summary.available_extra_payment_cents,
            account_health=summary.account_health,
            payoff=payoff,
        )

    except InvalidStrategyError as e:
        logging.warning(f"Invalid strategy: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

"""POST /v1/patterns/detect - recurring expense and income detection"""

import time
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from cashflow_planner.api.v1.schemas import (
    DetectionRequest,
    DetectionResponse,
    PatternSchema,
    TransactionSchema,
    UndetectedChargeSchema,
)
from cashflow_planner.api.dependencies import get_detection_options, get_request_id
from cashflow_planner.domain.detector import detect_patterns, find_undetected_recurring_expenses
from cashflow_planner.domain.models import DetectionOptions, RecurringPattern, Transaction
from cashflow_planner.infrastructure.observability.metrics import record_detection
from cashflow_planner.infrastructure.observability.logging import log_detection

router = APIRouter()


def to_transactions(items: List[TransactionSchema]) -> List[Transaction]:
    """Map request records to domain transactions (missing fields stay None)"""
    return [
        Transaction(
            date=item.date,
            description=item.description,
            amount_cents=item.amount_cents,
            category=item.category,
        )
        for item in items
    ]


def to_pattern_schema(pattern: RecurringPattern) -> PatternSchema:
    return PatternSchema(
        description=pattern.description,
        category=pattern.category,
        occurrence_count=pattern.occurrence_count,
        average_amount=round(pattern.average_amount, 2),
        total_amount=pattern.total_amount,
        last_occurrence=pattern.last_occurrence,
        estimated_frequency=pattern.estimated_frequency.value,
        monthly_equivalent=round(pattern.monthly_equivalent, 2),
    )


@router.post("/patterns/detect", response_model=DetectionResponse)
def detect(
    request_body: DetectionRequest,
    request: Request,
    options: DetectionOptions = Depends(get_detection_options),
):
    """
    Detect recurring expenses and income in a transaction list.

    Flow:
    1. Map records to domain transactions (malformed ones are skipped by the detector)
    2. Detect expense and income patterns
    3. Suggest repeated same-amount charges the detector rejected
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        transactions = to_transactions(request_body.transactions)
        ignored = [(i.description, i.amount) for i in request_body.ignored]

        result = detect_patterns(transactions, request_body.current_date, options, ignored)
        undetected = find_undetected_recurring_expenses(transactions, result.expenses)

        duration_ms = (time.time() - start_time) * 1000
        record_detection(len(result.expenses), len(result.income))
        log_detection(request_id, len(transactions), len(result.expenses), len(result.income), duration_ms)

        return DetectionResponse(
            expenses=[to_pattern_schema(p) for p in result.expenses],
            income=[to_pattern_schema(p) for p in result.income],
            undetected=[
                UndetectedChargeSchema(
                    description=c.description,
                    amount=c.amount,
                    count=c.count,
                    last_occurrence=c.last_occurrence,
                    category=c.category,
                )
                for c in undetected
            ],
            monthly_expenses=round(result.monthly_expenses, 2),
            monthly_income=round(result.monthly_income, 2),
        )

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

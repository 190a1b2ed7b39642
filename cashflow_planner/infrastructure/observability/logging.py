"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "cashflow-planner"


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_detection(
    request_id: str,
    transaction_count: int,
    expense_count: int,
    income_count: int,
    duration_ms: float,
) -> None:
    """Log structured pattern-detection outcome"""
    logging.info(
        "Pattern detection completed",
        extra={
            "request_id": request_id,
            "step": "detection_complete",
            "transaction_count": transaction_count,
            "expense_patterns": expense_count,
            "income_patterns": income_count,
            "duration_ms": duration_ms,
        },
    )


def log_payoff_plan(
    request_id: str,
    strategy: str,
    debt_count: int,
    months_to_payoff: int,
    paid_off: bool,
    duration_ms: float,
) -> None:
    """Log structured payoff simulation outcome"""
    logging.info(
        "Payoff plan completed",
        extra={
            "request_id": request_id,
            "step": "payoff_complete",
            "strategy": strategy,
            "debt_count": debt_count,
            "months_to_payoff": months_to_payoff,
            "payoff_outcome": "paid_off" if paid_off else "safety_cap",
            "duration_ms": duration_ms,
        },
    )


def log_payoff_projection(
    request_id: str,
    months: int,
    paid_off: bool,
    duration_ms: float,
) -> None:
    """Log structured single-debt projection outcome"""
    logging.info(
        "Payoff projection completed",
        extra={
            "request_id": request_id,
            "step": "projection_complete",
            "months": months,
            "payoff_outcome": "paid_off" if paid_off else "safety_cap",
            "duration_ms": duration_ms,
        },
    )

"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from cashflow_planner.config import settings
from cashflow_planner.domain.models import DetectionOptions


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_detection_options() -> DetectionOptions:
    """Detector thresholds from settings"""
    return settings.detection_options()


def get_max_payoff_months() -> int:
    """Simulation safety horizon from settings"""
    return settings.max_payoff_months


def get_minimum_payment_floor_pct() -> float:
    """Minimum principal as a share of balance"""
    return settings.minimum_payment_floor_pct

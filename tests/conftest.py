"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient
from cashflow_planner.api.main import create_app
from cashflow_planner.domain.models import Debt, Transaction


# Fixed reference date so staleness checks never depend on the wall clock
TODAY = date(2025, 6, 30)


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def mock_debts() -> list[Debt]:
    """Two credit cards and a personal loan"""
    return [
        Debt(
            id="debt-1",
            name="Credit Card A",
            balance_cents=300000,  # $3,000
            interest_rate=19.99,
            minimum_payment_cents=5000,  # $50
            monthly_payment_cents=10000,  # $100
        ),
        Debt(
            id="debt-2",
            name="Credit Card B",
            balance_cents=500000,  # $5,000
            interest_rate=21.5,
            minimum_payment_cents=7500,  # $75
            monthly_payment_cents=15000,  # $150
        ),
        Debt(
            id="debt-3",
            name="Personal Loan",
            balance_cents=1000000,  # $10,000
            interest_rate=8.5,
            minimum_payment_cents=15000,  # $150
            monthly_payment_cents=30000,  # $300
        ),
    ]


@pytest.fixture
def household_transactions() -> list[Transaction]:
    """Six months of a typical checking account ending on TODAY"""
    start = TODAY - timedelta(days=180)
    transactions = []

    # Biweekly paycheck, $1,624.74
    for i in range(13):
        transactions.append(
            Transaction(
                date=start + timedelta(days=i * 14),
                description="ACME CORP PAYROLL",
                amount_cents=162474,
                category="Salary",
            )
        )

    # Monthly rent and streaming on fixed days
    for month in range(1, 7):
        transactions.append(
            Transaction(
                date=date(2025, month, 1),
                description="OAKWOOD APARTMENTS RENT",
                amount_cents=-145000,  # $1,450
                category="Housing",
            )
        )
        transactions.append(
            Transaction(
                date=date(2025, month, 12),
                description=f"NETFLIX.COM {880000 + month}",
                amount_cents=-1549,  # $15.49
                category="Subscriptions",
            )
        )

    # Weekly gym class
    for i in range(20):
        transactions.append(
            Transaction(
                date=start + timedelta(days=40 + i * 7),
                description="IRONWORKS GYM",
                amount_cents=-2500,
                category="Healthcare",
            )
        )

    # One-off purchases that must never become patterns
    transactions.append(Transaction(date=date(2025, 3, 3), description="BEST BUY #112", amount_cents=-89999))
    transactions.append(Transaction(date=date(2025, 4, 9), description="SHELL OIL 5731", amount_cents=-4512))

    return transactions

"""Unit tests for recurring expense and income detection"""

import copy
import pytest
from datetime import date, datetime, timedelta

from cashflow_planner.domain.detector import (
    detect_income_patterns,
    detect_patterns,
    detect_recurring_expenses,
    find_undetected_recurring_expenses,
)
from cashflow_planner.domain.models import DetectionOptions, Frequency, Transaction


def _txn(day: date, description: str, amount_cents: int, category: str = None) -> Transaction:
    return Transaction(date=day, description=description, amount_cents=amount_cents, category=category)


@pytest.fixture
def spotify_transactions() -> list[Transaction]:
    return [
        _txn(date(2025, 1, 2), "Spotify Subscription", -790),  # $7.90
        _txn(date(2025, 2, 1), "Spotify Subscription", -790),
        _txn(date(2025, 3, 1), "Spotify Subscription", -792),  # $7.92
    ]


def test_detects_monthly_subscription(spotify_transactions):
    """Test three monthly Spotify charges with a 2 cent drift"""
    patterns = detect_recurring_expenses(spotify_transactions, current_date=date(2025, 3, 15))

    assert len(patterns) == 1
    pattern = patterns[0]
    assert pattern.estimated_frequency == Frequency.MONTHLY
    assert pattern.occurrence_count == 3
    assert pattern.average_amount == pytest.approx(7.91, abs=0.01)
    assert pattern.total_amount == pytest.approx(23.72, abs=0.01)
    assert pattern.last_occurrence == date(2025, 3, 1)
    assert pattern.description == "Spotify Subscription"
    assert pattern.category == "Other"


def test_detection_is_idempotent_and_does_not_mutate_input(spotify_transactions):
    """Test same input gives the same output and the list is left untouched"""
    snapshot = copy.deepcopy(spotify_transactions)

    first = detect_recurring_expenses(spotify_transactions, current_date=date(2025, 3, 15))
    second = detect_recurring_expenses(spotify_transactions, current_date=date(2025, 3, 15))

    assert first == second
    assert spotify_transactions == snapshot


def test_input_order_does_not_matter(spotify_transactions):
    """Test reversed input yields the same patterns"""
    forward = detect_recurring_expenses(spotify_transactions, current_date=date(2025, 3, 15))
    backward = detect_recurring_expenses(list(reversed(spotify_transactions)), current_date=date(2025, 3, 15))
    assert forward == backward


def test_charge_crossing_bucket_edge_stays_one_pattern():
    """Test $7.92 and $7.93 land in neighbouring buckets but one cluster"""
    transactions = [
        _txn(date(2025, 1, 5), "SPOTIFY USA", -792),
        _txn(date(2025, 2, 5), "SPOTIFY USA", -793),
        _txn(date(2025, 3, 5), "SPOTIFY USA", -792),
    ]

    patterns = detect_recurring_expenses(transactions, current_date=date(2025, 3, 15))

    assert len(patterns) == 1
    assert patterns[0].occurrence_count == 3


def test_every_pattern_has_at_least_two_occurrences():
    """Test a single charge never becomes a pattern, even for a subscription"""
    transactions = [
        _txn(date(2025, 3, 1), "NETFLIX.COM", -1549),
        _txn(date(2025, 3, 3), "BEST BUY #112", -89999),
    ]

    assert detect_recurring_expenses(transactions, current_date=date(2025, 3, 15)) == []


def test_subscription_needs_only_two_occurrences():
    """Test known subscription vendors are accepted with 2 charges"""
    transactions = [
        _txn(date(2025, 2, 12), "NETFLIX.COM 880002", -1549),
        _txn(date(2025, 3, 12), "NETFLIX.COM 880003", -1549),
    ]

    patterns = detect_recurring_expenses(transactions, current_date=date(2025, 3, 15))

    assert len(patterns) == 1
    assert patterns[0].occurrence_count == 2
    assert patterns[0].estimated_frequency == Frequency.MONTHLY


def test_ordinary_vendor_needs_three_occurrences():
    """Test two utility bills are not enough"""
    transactions = [
        _txn(date(2025, 2, 20), "CITY WATER DEPT", -6012),
        _txn(date(2025, 3, 20), "CITY WATER DEPT", -6012),
    ]

    assert detect_recurring_expenses(transactions, current_date=date(2025, 3, 25)) == []


def test_same_amount_different_vendors_rejected():
    """Test unrelated pharmacy purchases at the same price are not a pattern"""
    transactions = [
        _txn(date(2025, 1, 5), "CVS PHARMACY 0231", -912),
        _txn(date(2025, 2, 4), "WALGREENS 4411", -912),
        _txn(date(2025, 3, 6), "RITE AID 118", -912),
    ]

    assert detect_recurring_expenses(transactions, current_date=date(2025, 3, 15)) == []


def test_inconsistent_amounts_rejected():
    """Test a cluster whose amounts vary more than 10% is dropped"""
    # 10, 15 and 20 cents chain across neighbouring buckets; CV ~27%
    transactions = [
        _txn(date(2025, 3, 1), "PARKING METER", -10),
        _txn(date(2025, 3, 8), "PARKING METER", -15),
        _txn(date(2025, 3, 15), "PARKING METER", -20),
    ]

    assert detect_recurring_expenses(transactions, current_date=date(2025, 3, 20)) == []


def test_consistent_amounts_accepted():
    """Test the same meter at a flat price is weekly"""
    transactions = [
        _txn(date(2025, 3, 1), "PARKING METER", -10),
        _txn(date(2025, 3, 8), "PARKING METER", -10),
        _txn(date(2025, 3, 15), "PARKING METER", -10),
    ]

    patterns = detect_recurring_expenses(transactions, current_date=date(2025, 3, 20))

    assert len(patterns) == 1
    assert patterns[0].estimated_frequency == Frequency.WEEKLY


def test_stale_pattern_dropped():
    """Test a subscription last charged over 6 months ago is discontinued"""
    transactions = [_txn(date(2024, m, 10), "HULU", -1799) for m in range(1, 5)]

    assert detect_recurring_expenses(transactions, current_date=date(2024, 6, 1))
    assert detect_recurring_expenses(transactions, current_date=date(2025, 6, 30)) == []


def test_quarterly_pattern_not_surfaced():
    """Test only weekly, biweekly and monthly expenses are returned"""
    start = date(2024, 7, 1)
    transactions = [_txn(start + timedelta(days=91 * i), "STATE FARM INSURANCE", -42000) for i in range(4)]

    assert detect_recurring_expenses(transactions, current_date=date(2025, 4, 15)) == []


def test_ignored_expense_removed():
    """Test patterns the user dismissed are filtered by description and amount"""
    transactions = [
        _txn(date(2025, 1, 5), "PLANET FITNESS", -2499),
        _txn(date(2025, 2, 5), "PLANET FITNESS", -2499),
        _txn(date(2025, 3, 5), "PLANET FITNESS", -2499),
    ]

    kept = detect_recurring_expenses(transactions, current_date=date(2025, 3, 15))
    ignored = detect_recurring_expenses(
        transactions,
        current_date=date(2025, 3, 15),
        ignored=[("PLANET FITNESS", 24.99)],
    )

    assert len(kept) == 1
    assert ignored == []


def test_checks_use_check_frequency():
    """Test two weekly checks to the same payee"""
    transactions = [
        _txn(date(2025, 3, 3), "CHECK #1001", -30000),  # $300
        _txn(date(2025, 3, 10), "CHECK #1002", -30000),
    ]

    patterns = detect_recurring_expenses(transactions, current_date=date(2025, 3, 15))

    assert len(patterns) == 1
    assert patterns[0].estimated_frequency == Frequency.WEEKLY
    assert patterns[0].description == "CHECK #1002"


def test_patterns_sorted_most_recent_first(household_transactions, today):
    """Test gym, streaming and rent come back newest first"""
    patterns = detect_recurring_expenses(household_transactions, current_date=today)

    assert [p.last_occurrence for p in patterns] == sorted(
        (p.last_occurrence for p in patterns), reverse=True
    )
    assert [p.description for p in patterns] == [
        "IRONWORKS GYM",
        "NETFLIX.COM 880006",
        "OAKWOOD APARTMENTS RENT",
    ]


def test_household_expense_frequencies(household_transactions, today):
    """Test one-off purchases are ignored and each bill gets its cadence"""
    patterns = {p.description: p for p in detect_recurring_expenses(household_transactions, current_date=today)}

    assert patterns["OAKWOOD APARTMENTS RENT"].estimated_frequency == Frequency.MONTHLY
    assert patterns["OAKWOOD APARTMENTS RENT"].occurrence_count == 6
    assert patterns["NETFLIX.COM 880006"].estimated_frequency == Frequency.MONTHLY
    assert patterns["IRONWORKS GYM"].estimated_frequency == Frequency.WEEKLY
    assert patterns["IRONWORKS GYM"].occurrence_count == 20
    assert patterns["IRONWORKS GYM"].category == "Healthcare"


def test_malformed_records_skipped():
    """Test records without a date or amount are ignored, not fatal"""
    transactions = [
        _txn(date(2025, 1, 2), "Spotify Subscription", -790),
        Transaction(date=None, description="Spotify Subscription", amount_cents=-790),
        _txn(date(2025, 2, 1), "Spotify Subscription", -790),
        Transaction(date=date(2025, 2, 15), description="Spotify Subscription", amount_cents=None),
        _txn(date(2025, 3, 1), "Spotify Subscription", -792),
        Transaction(date=date(2025, 3, 2), description=None, amount_cents=-5000),
    ]

    patterns = detect_recurring_expenses(transactions, current_date=date(2025, 3, 15))

    assert len(patterns) == 1
    assert patterns[0].occurrence_count == 3


def test_empty_input():
    """Test no transactions yields no patterns"""
    assert detect_recurring_expenses([], current_date=date(2025, 3, 15)) == []
    assert detect_income_patterns([]) == []


def test_custom_options_raise_occurrence_floor(spotify_transactions):
    """Test tuning knobs are honoured"""
    options = DetectionOptions(high_confidence_min_occurrences=4, default_min_occurrences=4)

    assert detect_recurring_expenses(spotify_transactions, date(2025, 3, 15), options) == []


def test_biweekly_income(household_transactions):
    """Test biweekly payroll deposits"""
    income = detect_income_patterns(household_transactions)

    assert len(income) == 1
    paycheck = income[0]
    assert paycheck.description == "ACME CORP PAYROLL"
    assert paycheck.category == "Salary"
    assert paycheck.occurrence_count == 13
    assert paycheck.estimated_frequency == Frequency.BIWEEKLY
    assert paycheck.average_amount == pytest.approx(1624.74)
    assert paycheck.monthly_equivalent == pytest.approx(3520.27, abs=0.01)


def test_semi_monthly_income():
    """Test paydays on the 1st and 15th"""
    transactions = []
    for month in range(1, 5):
        transactions.append(_txn(date(2025, month, 1), "STATE UNIV PAYROLL", 210000))
        transactions.append(_txn(date(2025, month, 15), "STATE UNIV PAYROLL", 210000))

    income = detect_income_patterns(transactions)

    assert len(income) == 1
    assert income[0].estimated_frequency == Frequency.SEMI_MONTHLY
    assert income[0].monthly_equivalent == pytest.approx(4200.0)  # $2,100 x 2


def test_income_with_two_deposits_gets_a_frequency():
    """Test two monthly deposits are enough for income"""
    transactions = [
        _txn(date(2025, 1, 31), "Pension Income", 95000),
        _txn(date(2025, 3, 2), "Pension Income", 95000),
    ]

    income = detect_income_patterns(transactions)

    assert len(income) == 1
    assert income[0].estimated_frequency == Frequency.MONTHLY


def test_non_income_deposits_ignored():
    """Test refunds and transfers are not income"""
    transactions = [
        _txn(date(2025, 1, 10), "VENMO CASHOUT", 5000),
        _txn(date(2025, 2, 10), "VENMO CASHOUT", 5000),
        _txn(date(2025, 3, 10), "VENMO CASHOUT", 5000),
    ]

    assert detect_income_patterns(transactions) == []


def test_detect_patterns_combines_expenses_and_income(household_transactions, today):
    """Test single entry point returns both sides"""
    result = detect_patterns(household_transactions, current_date=today)

    assert len(result.expenses) == 3
    assert len(result.income) == 1
    # $1,450 rent + $15.49 streaming + $25 x 52/12 gym
    assert result.monthly_expenses == pytest.approx(1573.82, abs=0.01)
    assert result.monthly_income == pytest.approx(3520.27, abs=0.01)


def test_find_undetected_recurring_expenses():
    """Test same-amount charges from a drifting payee are suggested"""
    transactions = [
        _txn(date(2025, 1, 1), "ZELLE TO J SMITH", -120000),
        _txn(date(2025, 2, 1), "ONLINE XFER M JONES", -120000),
        _txn(date(2025, 1, 2), "Spotify Subscription", -790),
        _txn(date(2025, 2, 1), "Spotify Subscription", -790),
        _txn(date(2025, 3, 1), "Spotify Subscription", -790),
    ]
    detected = detect_recurring_expenses(transactions, current_date=date(2025, 3, 15))

    undetected = find_undetected_recurring_expenses(transactions, detected)

    assert len(undetected) == 1
    charge = undetected[0]
    assert charge.amount == -1200.0
    assert charge.count == 2
    assert charge.description == "ONLINE XFER M JONES"
    assert charge.last_occurrence == date(2025, 2, 1)
    assert len(charge.transactions) == 2


def test_find_undetected_household_is_empty(household_transactions, today):
    """Test every repeated amount in the household is already detected"""
    detected = detect_recurring_expenses(household_transactions, current_date=today)
    assert find_undetected_recurring_expenses(household_transactions, detected) == []


@pytest.mark.parametrize("prefix", ["CK ", "CK#"])
def test_ck_style_checks_detected(prefix):
    """Test checks written as 'CK 1041' or 'CK#1041' have no vendor token but still recur"""
    transactions = [
        _txn(date(2025, month, 5), f"{prefix}{1040 + month}", -120000)  # $1,200
        for month in range(1, 5)
    ]

    patterns = detect_recurring_expenses(transactions, current_date=date(2025, 5, 1))

    assert len(patterns) == 1
    assert patterns[0].estimated_frequency == Frequency.MONTHLY
    assert patterns[0].occurrence_count == 4
    assert patterns[0].description == f"{prefix}1044"


def test_ck_checks_mixed_formats_form_one_cluster():
    """Test "CK 1041" and "CK#1042" normalize to the same payee"""
    transactions = [
        _txn(date(2025, 2, 5), "CK 1041", -95000),  # $950
        _txn(date(2025, 3, 5), "CK#1042", -95000),
    ]

    patterns = detect_recurring_expenses(transactions, current_date=date(2025, 4, 1))

    # Checks need only two occurrences
    assert len(patterns) == 1
    assert patterns[0].occurrence_count == 2
    assert patterns[0].estimated_frequency == Frequency.MONTHLY


def test_datetime_dates_are_reduced_to_dates():
    """Test timestamped records and a datetime current_date behave like plain dates"""
    transactions = [
        _txn(datetime(2025, 1, 2, 9, 30), "Spotify Subscription", -790),
        _txn(datetime(2025, 2, 1, 9, 30), "Spotify Subscription", -790),
        _txn(datetime(2025, 3, 1, 9, 30), "Spotify Subscription", -792),
    ]

    patterns = detect_recurring_expenses(transactions, current_date=datetime(2025, 3, 15, 12, 0))

    assert len(patterns) == 1
    assert patterns[0].estimated_frequency == Frequency.MONTHLY
    assert patterns[0].last_occurrence == date(2025, 3, 1)
    assert type(patterns[0].last_occurrence) is date
    assert transactions[0].date == datetime(2025, 1, 2, 9, 30)  # input not mutated

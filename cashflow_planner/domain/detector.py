"""Recurring pattern detector - finds repeating expenses and income in a transaction list"""

import logging
import statistics
from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from cashflow_planner.domain.frequency import (
    coefficient_of_variation,
    infer_check_frequency,
    infer_frequency,
)
from cashflow_planner.domain.models import (
    DetectionOptions,
    DetectionResult,
    Frequency,
    RecurringPattern,
    Transaction,
    UndetectedCharge,
)
from cashflow_planner.domain.vendors import (
    amount_bucket,
    income_key,
    is_check_transaction,
    is_income_like,
    is_subscription_vendor,
    same_vendor,
    shares_vendor_token,
)
from cashflow_planner.utils.date_utils import months_ago

logger = logging.getLogger(__name__)

# Only steady monthly cash flow is surfaced for budgeting
BUDGET_FREQUENCIES = {Frequency.WEEKLY, Frequency.BIWEEKLY, Frequency.MONTHLY}

DEFAULT_CATEGORY = "Other"

# (description, average amount in major units) pairs the user dismissed
IgnoredExpense = Tuple[str, float]


def _chronological(transaction: Transaction) -> tuple:
    return (transaction.date, transaction.description or "", transaction.amount_cents)


def _as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


def _usable(transactions: Iterable[Transaction]) -> List[Transaction]:
    """Well-formed records in a stable chronological order, datetimes reduced to dates"""
    transactions = list(transactions)
    usable = [
        replace(t, date=_as_date(t.date))
        for t in transactions
        if t is not None and t.is_well_formed
    ]
    skipped = len(transactions) - len(usable)
    if skipped:
        logger.debug(f"Skipped {skipped} transactions without a date or amount")
    return sorted(usable, key=_chronological)


def _cluster_outflows(outflows: List[Transaction], options: DetectionOptions) -> List[List[Transaction]]:
    """
    Amount-bucket-then-vendor clustering.

    1. Round each absolute amount into a fixed bucket (5 cents by default).
    2. Inside a bucket, split members by vendor.
    3. Merge vendor groups from neighbouring buckets so a charge that moves
       across a bucket edge (7.92 -> 7.93) stays one cluster.
    """
    buckets: Dict[int, List[List[Transaction]]] = defaultdict(list)
    for txn in outflows:
        groups = buckets[amount_bucket(txn.amount_cents, options.amount_bucket_cents)]
        for group in groups:
            if same_vendor(group[0].description, txn.description):
                group.append(txn)
                break
        else:
            groups.append([txn])

    merged: List[Tuple[int, List[Transaction]]] = []
    for bucket in sorted(buckets):
        for group in buckets[bucket]:
            for index, (top_bucket, existing) in enumerate(merged):
                if bucket - top_bucket <= 1 and same_vendor(existing[0].description, group[0].description):
                    existing.extend(group)
                    merged[index] = (bucket, existing)
                    break
            else:
                merged.append((bucket, group))

    return [sorted(group, key=_chronological) for _, group in merged]


def _summarize(members: List[Transaction], frequency: Frequency) -> RecurringPattern:
    """Build the pattern for an accepted, chronologically sorted cluster"""
    most_recent = members[-1]
    amounts = [abs(t.amount_cents) / 100 for t in members]
    average = statistics.fmean(amounts)
    return RecurringPattern(
        description=(most_recent.description or "Unknown").strip(),
        category=most_recent.category or DEFAULT_CATEGORY,
        occurrence_count=len(members),
        average_amount=average,
        total_amount=round(average * len(members), 2),
        last_occurrence=most_recent.date,
        estimated_frequency=frequency,
    )


def _accept_expense_cluster(members: List[Transaction], options: DetectionOptions) -> Optional[RecurringPattern]:
    """Vendor, amount-consistency and occurrence checks; None when rejected"""
    descriptions = [t.description for t in members]
    label = members[-1].description
    is_check = is_check_transaction(label)

    # "CK 1043" has no vendor token; every member being a check is the match
    if is_check:
        if not all(is_check_transaction(d) for d in descriptions):
            return None
    elif not shares_vendor_token(descriptions, options.min_vendor_token_share):
        return None

    amounts = [abs(t.amount_cents) / 100 for t in members]
    if coefficient_of_variation(amounts) > options.max_amount_variation:
        return None

    if is_check or is_subscription_vendor(label):
        min_occurrences = options.high_confidence_min_occurrences
    else:
        min_occurrences = options.default_min_occurrences
    if len(members) < max(2, min_occurrences):
        return None

    dates = [t.date for t in members]
    frequency = infer_check_frequency(dates) if is_check else infer_frequency(dates)
    return _summarize(members, frequency)


def _is_ignored(pattern: RecurringPattern, ignored: Iterable[IgnoredExpense]) -> bool:
    return any(
        description == pattern.description and abs(amount - pattern.average_amount) < 0.01
        for description, amount in ignored
    )


def detect_recurring_expenses(
    transactions: Iterable[Transaction],
    current_date: date | None = None,
    options: DetectionOptions | None = None,
    ignored: Iterable[IgnoredExpense] = (),
) -> List[RecurringPattern]:
    """
    Find recurring outflows (subscriptions, rent, loan payments, checks).

    Only weekly, biweekly and monthly patterns are returned, and patterns
    whose last occurrence is more than 6 months before `current_date` are
    treated as discontinued. `current_date` defaults to today.

    Returns:
        Patterns sorted by last occurrence, most recent first
    """
    options = options or DetectionOptions()
    current_date = _as_date(current_date) if current_date is not None else date.today()
    ignored = list(ignored)

    outflows = [t for t in _usable(transactions) if t.amount_cents < 0]
    cutoff = months_ago(current_date, options.stale_after_months)

    patterns = []
    for members in _cluster_outflows(outflows, options):
        pattern = _accept_expense_cluster(members, options)
        if pattern is None:
            continue
        if pattern.estimated_frequency not in BUDGET_FREQUENCIES:
            continue
        if pattern.last_occurrence < cutoff:
            continue
        if _is_ignored(pattern, ignored):
            continue
        patterns.append(pattern)

    return sorted(patterns, key=lambda p: p.last_occurrence, reverse=True)


def detect_income_patterns(
    transactions: Iterable[Transaction],
    options: DetectionOptions | None = None,
) -> List[RecurringPattern]:
    """
    Find recurring salary-style deposits.

    Paychecks from one employer keep a consistent description, so deposits
    are grouped by near-exact description instead of amount. No frequency or
    staleness filter is applied.
    """
    options = options or DetectionOptions()

    grouped: Dict[str, List[Transaction]] = {}
    for txn in _usable(transactions):
        if txn.amount_cents <= 0 or not is_income_like(txn.description, txn.category):
            continue
        grouped.setdefault(income_key(txn.description), []).append(txn)

    patterns = []
    for members in grouped.values():
        if len(members) < max(2, options.income_min_occurrences):
            continue
        frequency = infer_frequency([t.date for t in members])
        patterns.append(_summarize(members, frequency))

    return sorted(patterns, key=lambda p: p.last_occurrence, reverse=True)


def detect_patterns(
    transactions: Iterable[Transaction],
    current_date: date | None = None,
    options: DetectionOptions | None = None,
    ignored: Iterable[IgnoredExpense] = (),
) -> DetectionResult:
    """Main entry point: recurring expenses and income from one transaction set"""
    transactions = list(transactions)
    return DetectionResult(
        expenses=detect_recurring_expenses(transactions, current_date, options, ignored),
        income=detect_income_patterns(transactions, options),
    )


def find_undetected_recurring_expenses(
    transactions: Iterable[Transaction],
    detected: Iterable[RecurringPattern],
) -> List[UndetectedCharge]:
    """
    Same-amount outflows seen 2+ times that no detected pattern covers.

    Used to offer "mark as recurring" suggestions for charges the detector
    rejected (e.g. rent paid to a landlord whose name changes every month).
    """
    detected_amounts = {round(p.average_amount, 2) for p in detected}

    by_amount: Dict[int, List[Transaction]] = {}
    for txn in _usable(transactions):
        if txn.amount_cents < 0:
            by_amount.setdefault(abs(txn.amount_cents), []).append(txn)

    undetected = []
    for amount_cents, members in by_amount.items():
        amount = round(amount_cents / 100, 2)
        if len(members) < 2 or amount in detected_amounts:
            continue
        most_recent = members[-1]
        undetected.append(
            UndetectedCharge(
                description=most_recent.description or "Unknown",
                amount=-amount,
                count=len(members),
                last_occurrence=most_recent.date,
                category=most_recent.category or DEFAULT_CATEGORY,
                transactions=members,
            )
        )

    return sorted(undetected, key=lambda c: c.last_occurrence, reverse=True)

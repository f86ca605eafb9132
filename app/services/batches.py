"""Browse-time conflict queries for a business's coaching batches.

Nothing here mutates the cart or passes; results only drive warning badges
and the batch-switch dialog.
"""

from __future__ import annotations

from datetime import date

from app import config
from app.domain.models import (
    Batch,
    Business,
    Candidate,
    CartItem,
    ConflictCheckResult,
    StudentPass,
    Weekday,
)
from app.services.conflicts import check_schedule_conflicts
from app.services.normalizer import collect_schedule_items
from app.services.recurrence import BATCH_PATTERN_DAYS


def resolve_batch_days(batch: Batch) -> list[Weekday]:
    """Map the batch's pattern code to weekdays, falling back to custom days."""
    days = BATCH_PATTERN_DAYS.get(batch.schedule_pattern)
    if days:
        return list(days)
    return list(batch.custom_days or [])


def check_batch_conflict(
    batch: Batch,
    subject_id: str,
    subject_name: str,
    business_id: str,
    business_name: str,
    cart: list[CartItem],
    active_passes: list[StudentPass],
) -> ConflictCheckResult:
    """Would adding *batch* conflict with the current cart or enrollments?"""
    days = resolve_batch_days(batch)
    if not days:
        return ConflictCheckResult()

    candidate = Candidate(
        batch_id=batch.id,
        subject_id=subject_id,
        subject_name=subject_name,
        business_id=business_id,
        business_name=business_name,
        schedule_days=days,
        start_time=batch.start_time,
        end_time=batch.end_time,
    )
    return check_schedule_conflicts(candidate, collect_schedule_items(cart, active_passes))


def build_batch_conflict_map(
    business: Business,
    cart: list[CartItem],
    active_passes: list[StudentPass],
) -> dict[str, ConflictCheckResult]:
    """Return the conflict result for every batch the business offers, by batch id."""
    conflict_map: dict[str, ConflictCheckResult] = {}
    for subject in business.subjects:
        for batch in subject.batches:
            conflict_map[batch.id] = check_batch_conflict(
                batch,
                subject.id,
                subject.name,
                business.id,
                business.name,
                cart,
                active_passes,
            )
    return conflict_map


def find_alternative_batches(business: Business, pass_: StudentPass) -> list[Batch]:
    """Batches of the pass's subject a student could switch into.

    Excludes the current batch, full batches and paused batches.
    """
    subject = next((s for s in business.subjects if s.id == pass_.subject_id), None)
    if subject is None:
        return []
    return [
        b
        for b in subject.batches
        if b.id != pass_.batch_id and b.enrolled < b.capacity and not b.is_paused
    ]


def can_switch_batch(pass_: StudentPass, today: date) -> bool:
    """A pass allows one batch switch, requested well before it starts."""
    if pass_.switch_used or pass_.start_date is None:
        return False
    return (pass_.start_date - today).days >= config.SWITCH_MIN_DAYS_BEFORE_START

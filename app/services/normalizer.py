"""Map cart entries and passes onto the uniform ScheduleItem shape.

Both mappers return ``None`` instead of raising when a record cannot be
expressed as a weekly coaching slot, so callers can map-and-filter over
mixed gym / library / coaching records.
"""

from __future__ import annotations

import logging

from app.domain.models import (
    BLOCKING_PASS_STATUSES,
    BusinessVertical,
    Candidate,
    CartItem,
    ScheduleItem,
    ScheduleSource,
    StudentPass,
)
from app.services.time_utils import split_slot_time, time_to_minutes

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 1440


def _label(subject_name: str | None, batch_name: str | None) -> str:
    return f"{subject_name or 'Class'} {batch_name or ''}".strip()


def _valid_range(start: int, end: int) -> bool:
    return 0 <= start < end <= MINUTES_PER_DAY


def cart_item_to_schedule(item: CartItem) -> ScheduleItem | None:
    """Return the ScheduleItem for a coaching cart entry, or ``None``."""
    if item.business_vertical != BusinessVertical.COACHING or not item.schedule_days:
        return None
    slot = split_slot_time(item.slot_time)
    if slot is None:
        logger.debug("Cart item %s has no usable slot time", item.id)
        return None
    start, end = time_to_minutes(slot[0]), time_to_minutes(slot[1])
    if not _valid_range(start, end):
        logger.debug("Cart item %s has a degenerate slot %r", item.id, item.slot_time)
        return None
    return ScheduleItem(
        id=item.id,
        label=_label(item.subject_name, item.batch_name),
        business_id=item.business_id,
        business_name=item.business_name,
        subject_id=item.subject_id,
        subject_name=item.subject_name,
        batch_id=item.batch_id,
        schedule_days=list(item.schedule_days),
        start_minutes=start,
        end_minutes=end,
        source=ScheduleSource.CART,
    )


def pass_to_schedule(pass_: StudentPass) -> ScheduleItem | None:
    """Return the ScheduleItem for an active/reserved coaching pass, or ``None``.

    Paused, expired and cancelled passes no longer hold a seat and are
    excluded from conflict checks.
    """
    if pass_.business_vertical != BusinessVertical.COACHING or not pass_.schedule_days:
        return None
    if not pass_.slot_start_time or not pass_.slot_end_time:
        return None
    if pass_.status not in BLOCKING_PASS_STATUSES:
        return None
    start = time_to_minutes(pass_.slot_start_time)
    end = time_to_minutes(pass_.slot_end_time)
    if not _valid_range(start, end):
        logger.debug("Pass %s has a degenerate slot", pass_.id)
        return None
    return ScheduleItem(
        id=pass_.id,
        label=_label(pass_.subject_name, pass_.batch_name),
        business_id=pass_.business_id,
        business_name=pass_.business_name,
        subject_id=pass_.subject_id,
        subject_name=pass_.subject_name,
        batch_id=pass_.batch_id,
        schedule_days=list(pass_.schedule_days),
        start_minutes=start,
        end_minutes=end,
        source=ScheduleSource.ENROLLMENT,
    )


def candidate_from_cart_item(item: CartItem) -> Candidate | None:
    """Build the detector input for a cart entry under the same gating rules."""
    if cart_item_to_schedule(item) is None:
        return None
    start_time, end_time = split_slot_time(item.slot_time)
    return Candidate(
        batch_id=item.batch_id,
        subject_id=item.subject_id,
        subject_name=item.subject_name,
        business_id=item.business_id,
        business_name=item.business_name,
        schedule_days=list(item.schedule_days),
        start_time=start_time,
        end_time=end_time,
    )


def collect_schedule_items(
    cart: list[CartItem],
    passes: list[StudentPass],
) -> list[ScheduleItem]:
    """Normalize cart entries then passes, dropping anything not comparable."""
    items = [cart_item_to_schedule(item) for item in cart]
    items.extend(pass_to_schedule(p) for p in passes)
    return [item for item in items if item is not None]

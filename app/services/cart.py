"""Service for validating a student's cart before checkout."""

from __future__ import annotations

import logging

from app.domain.models import (
    BLOCKING_PASS_STATUSES,
    BusinessVertical,
    CartItem,
    CartPairConflict,
    CartValidationResult,
    ConflictInfo,
    EnrollmentConflict,
    StudentPass,
)
from app.services.conflicts import check_schedule_conflicts
from app.services.normalizer import (
    candidate_from_cart_item,
    cart_item_to_schedule,
    collect_schedule_items,
    pass_to_schedule,
)

logger = logging.getLogger(__name__)


def validate_cart(
    cart_items: list[CartItem],
    active_passes: list[StudentPass],
) -> CartValidationResult:
    """Validate every cart item against enrollments and against each other.

    Cart pairs are only checked forward (i < j) so each pair is reported
    once. Info messages are deduplicated, keeping first-seen order.
    """
    enrollment_conflicts: list[EnrollmentConflict] = []
    cart_pair_conflicts: list[CartPairConflict] = []
    conflicting_item_ids: set[str] = set()
    info_messages: dict[str, None] = {}

    enrollment_items = [
        item for item in map(pass_to_schedule, active_passes) if item is not None
    ]

    for i, item in enumerate(cart_items):
        candidate = candidate_from_cart_item(item)
        if candidate is None:
            continue

        result = check_schedule_conflicts(candidate, enrollment_items)
        for detail in result.conflicts:
            enrollment_conflicts.append(EnrollmentConflict(cart_item=item, detail=detail))
            conflicting_item_ids.add(item.id)
        info_messages.update(dict.fromkeys(result.info_messages))

        for other in cart_items[i + 1 :]:
            other_schedule = cart_item_to_schedule(other)
            if other_schedule is None:
                continue
            pair_result = check_schedule_conflicts(candidate, [other_schedule])
            for detail in pair_result.conflicts:
                cart_pair_conflicts.append(
                    CartPairConflict(item_a=item, item_b=other, detail=detail)
                )
                conflicting_item_ids.add(item.id)
                conflicting_item_ids.add(other.id)
            info_messages.update(dict.fromkeys(pair_result.info_messages))

    logger.debug(
        "Validated cart of %d items: %d pair conflicts, %d enrollment conflicts",
        len(cart_items),
        len(cart_pair_conflicts),
        len(enrollment_conflicts),
    )
    return CartValidationResult(
        has_conflicts=bool(cart_pair_conflicts or enrollment_conflicts),
        cart_pair_conflicts=cart_pair_conflicts,
        enrollment_conflicts=enrollment_conflicts,
        conflicting_item_ids=conflicting_item_ids,
        info_messages=list(info_messages),
    )


def check_cart_addition(
    item: CartItem,
    cart: list[CartItem],
    passes: list[StudentPass],
) -> ConflictInfo:
    """Check whether *item* can be added to the cart.

    Gym and library passes conflict with an active pass at the same business
    or the same pass template already in the cart. Coaching items go through
    the full schedule detector.
    """
    if item.business_vertical != BusinessVertical.COACHING or item.schedule_days is None:
        existing_pass = next(
            (
                p
                for p in passes
                if p.business_id == item.business_id
                and p.status in BLOCKING_PASS_STATUSES
            ),
            None,
        )
        existing_cart_item = next(
            (
                c
                for c in cart
                if c.business_id == item.business_id
                and c.pass_template_id == item.pass_template_id
            ),
            None,
        )
        existing = existing_pass or existing_cart_item
        if existing is not None:
            return ConflictInfo(has_conflict=True, conflicting_item_id=existing.id)
        return ConflictInfo()

    candidate = candidate_from_cart_item(item)
    if candidate is None:
        return ConflictInfo()

    result = check_schedule_conflicts(candidate, collect_schedule_items(cart, passes))
    if not result.has_conflict:
        return ConflictInfo(result=result)

    first = result.conflicts[0]
    return ConflictInfo(
        has_conflict=True,
        conflicting_item_id=first.conflicting_item.id,
        conflict_days=first.overlap_days,
        conflict_time=first.overlap_time_range,
        result=result,
    )

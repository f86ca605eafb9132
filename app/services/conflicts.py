"""Service for detecting schedule conflicts between weekly coaching slots."""

from __future__ import annotations

import logging

from app.domain.models import (
    Candidate,
    ConflictCheckResult,
    ConflictDetail,
    ConflictType,
    OverlapShape,
    ScheduleItem,
    ScheduleSource,
)
from app.domain.relations import (
    BackToBack,
    DisjointDays,
    DuplicateBatch,
    PairRelation,
    SameSubjectSameCenter,
    SeparatedTimes,
    TimeOverlap,
)
from app.services.time_utils import (
    format_days,
    format_duration,
    minutes_to_time,
    time_ranges_overlap,
    time_to_minutes,
)

logger = logging.getLogger(__name__)


def _overlap_shape(
    cand_start: int, cand_end: int, existing: ScheduleItem
) -> OverlapShape:
    if cand_start == existing.start_minutes and cand_end == existing.end_minutes:
        return OverlapShape.EXACT
    if cand_start >= existing.start_minutes and cand_end <= existing.end_minutes:
        return OverlapShape.CANDIDATE_WITHIN
    if existing.start_minutes >= cand_start and existing.end_minutes <= cand_end:
        return OverlapShape.EXISTING_WITHIN
    return OverlapShape.PARTIAL


def classify_pair(
    candidate: Candidate,
    cand_start: int,
    cand_end: int,
    existing: ScheduleItem,
) -> PairRelation:
    """Classify how *candidate* relates to a single *existing* item.

    Rules are evaluated in priority order; the first match wins:
    duplicate batch, same subject at the same business, disjoint days,
    non-overlapping times on shared days, then genuine overlap.
    """
    if candidate.batch_id and candidate.batch_id == existing.batch_id:
        return DuplicateBatch()

    same_subject = bool(candidate.subject_id) and candidate.subject_id == existing.subject_id
    same_business = candidate.business_id == existing.business_id
    if same_subject and same_business:
        return SameSubjectSameCenter()

    common_days = [d for d in candidate.schedule_days if d in existing.schedule_days]
    if not common_days:
        return DisjointDays(same_subject_elsewhere=same_subject and not same_business)

    if not time_ranges_overlap(
        cand_start, cand_end, existing.start_minutes, existing.end_minutes
    ):
        gap = min(
            abs(cand_start - existing.end_minutes),
            abs(existing.start_minutes - cand_end),
        )
        if gap == 0:
            return BackToBack(
                common_days=common_days,
                candidate_first=cand_start < existing.start_minutes,
                same_business=same_business,
            )
        return SeparatedTimes(common_days=common_days, gap_minutes=gap)

    return TimeOverlap(
        common_days=common_days,
        overlap_start=max(cand_start, existing.start_minutes),
        overlap_end=min(cand_end, existing.end_minutes),
        shape=_overlap_shape(cand_start, cand_end, existing),
    )


# ---------------------------------------------------------------------------
# Message builders
# ---------------------------------------------------------------------------


def _duplicate_message(existing: ScheduleItem) -> str:
    where = "enrolled" if existing.source == ScheduleSource.ENROLLMENT else "in your cart"
    return (
        f'You already have "{existing.label}" {where}. '
        "You cannot add the same batch twice."
    )


def _same_center_message(candidate: Candidate, existing: ScheduleItem) -> str:
    return (
        f"Cannot add {candidate.subject_name or 'this subject'} — you already have "
        f'"{existing.label}" at {existing.business_name}. Students cannot enroll in '
        "multiple batches of the same subject at the same coaching center. If you "
        "want to switch batches, please contact the coaching center."
    )


def _same_subject_elsewhere_message(candidate: Candidate, existing: ScheduleItem) -> str:
    return (
        f"ℹ️ Note: You are enrolling in {candidate.subject_name or 'the same subject'} "
        f"at two different coaching centers ({candidate.business_name} and "
        f"{existing.business_name}). This is allowed but verify if you need both."
    )


def _back_to_back_message(
    candidate: Candidate, existing: ScheduleItem, relation: BackToBack
) -> str:
    if not relation.same_business:
        return (
            "ℹ️ Note: These classes are at different locations "
            f"({candidate.business_name} and {existing.business_name}) with no gap "
            "between them. Ensure you can travel between locations in time."
        )
    candidate_label = candidate.subject_name or "this class"
    if relation.candidate_first:
        earlier, later = candidate_label, existing.label
    else:
        earlier, later = existing.label, candidate_label
    return (
        f"✓ No conflict. {later} starts right after {earlier} ends. "
        f"You'll have consecutive classes on {format_days(relation.common_days)}."
    )


def _overlap_message(
    candidate: Candidate,
    cand_start: int,
    cand_end: int,
    existing: ScheduleItem,
    relation: TimeOverlap,
    overlap_range: str,
) -> str:
    intro = (
        f"Cannot add {candidate.subject_name or 'this batch'} to cart. This batch runs "
        f"{format_days(relation.common_days)} from {minutes_to_time(cand_start)} "
        f"to {minutes_to_time(cand_end)}"
    )
    existing_range = (
        f"{minutes_to_time(existing.start_minutes)}-{minutes_to_time(existing.end_minutes)}"
    )
    if relation.shape == OverlapShape.EXACT:
        return (
            f"{intro}, which is the exact same schedule as your {existing.label} at "
            f"{existing.business_name}. You cannot attend two classes at the same time."
        )
    if relation.shape == OverlapShape.CANDIDATE_WITHIN:
        return (
            f"{intro}, which falls completely within your {existing.label} "
            f"({existing_range}) at {existing.business_name}."
        )
    if relation.shape == OverlapShape.EXISTING_WITHIN:
        return (
            f"{intro}, which completely encompasses your {existing.label} "
            f"({existing_range}) at {existing.business_name}."
        )
    return (
        f"{intro}, which overlaps with your {existing.label} ({existing_range}) at "
        f"{existing.business_name} by {format_duration(relation.minutes)}. "
        f"The classes overlap from {overlap_range}."
    )


# ---------------------------------------------------------------------------
# Detector
# ---------------------------------------------------------------------------


def check_schedule_conflicts(
    candidate: Candidate,
    existing_items: list[ScheduleItem],
) -> ConflictCheckResult:
    """Check a candidate slot against existing schedule items.

    Every blocking conflict is returned, in the order of *existing_items*.
    Back-to-back and same-subject-elsewhere findings are reported as
    non-blocking info messages. Never raises for incomplete input.
    """
    conflicts: list[ConflictDetail] = []
    info_messages: list[str] = []

    cand_start = time_to_minutes(candidate.start_time)
    cand_end = time_to_minutes(candidate.end_time)

    for existing in existing_items:
        relation = classify_pair(candidate, cand_start, cand_end, existing)

        if isinstance(relation, DuplicateBatch):
            conflicts.append(
                ConflictDetail(
                    type=ConflictType.DUPLICATE_BATCH,
                    conflicting_item=existing,
                    overlap_days=list(candidate.schedule_days),
                    message=_duplicate_message(existing),
                )
            )
        elif isinstance(relation, SameSubjectSameCenter):
            conflicts.append(
                ConflictDetail(
                    type=ConflictType.SAME_SUBJECT_SAME_CENTER,
                    conflicting_item=existing,
                    overlap_days=list(candidate.schedule_days),
                    message=_same_center_message(candidate, existing),
                )
            )
        elif isinstance(relation, DisjointDays):
            if relation.same_subject_elsewhere:
                info_messages.append(_same_subject_elsewhere_message(candidate, existing))
        elif isinstance(relation, BackToBack):
            info_messages.append(_back_to_back_message(candidate, existing, relation))
        elif isinstance(relation, SeparatedTimes):
            pass
        elif isinstance(relation, TimeOverlap):
            overlap_range = (
                f"{minutes_to_time(relation.overlap_start)} - "
                f"{minutes_to_time(relation.overlap_end)}"
            )
            conflicts.append(
                ConflictDetail(
                    type=ConflictType.TIME_OVERLAP,
                    conflicting_item=existing,
                    overlap_days=relation.common_days,
                    overlap_minutes_amount=relation.minutes,
                    message=_overlap_message(
                        candidate, cand_start, cand_end, existing, relation, overlap_range
                    ),
                    overlap_time_range=overlap_range,
                )
            )
        else:
            raise TypeError(f"Unhandled pair relation: {relation!r}")

    logger.debug(
        "Checked candidate batch=%s against %d items: %d conflicts, %d notes",
        candidate.batch_id,
        len(existing_items),
        len(conflicts),
        len(info_messages),
    )
    return ConflictCheckResult(
        has_conflict=bool(conflicts),
        conflicts=conflicts,
        info_messages=info_messages,
    )

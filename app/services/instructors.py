"""Service for catching instructors booked into two overlapping classes."""

from __future__ import annotations

from app.domain.models import (
    ClassPatternCode,
    ClassStatus,
    CoachingClass,
    InstructorConflict,
)
from app.services.recurrence import CLASS_PATTERN_DAYS, CLASS_PATTERN_LABELS
from app.services.time_utils import (
    minutes_to_time,
    overlap_minutes,
    time_ranges_overlap,
    time_to_minutes,
)

_INACTIVE_CLASS_STATUSES = {ClassStatus.CANCELLED, ClassStatus.COMPLETED}


def _format_slot(pattern: ClassPatternCode, start_time: str, end_time: str) -> str:
    return (
        f"{CLASS_PATTERN_LABELS[pattern]} "
        f"{minutes_to_time(time_to_minutes(start_time))}-"
        f"{minutes_to_time(time_to_minutes(end_time))}"
    )


def check_instructor_conflict(
    teacher_name: str,
    schedule_pattern: ClassPatternCode,
    start_time: str,
    end_time: str,
    classes: list[CoachingClass],
    exclude_class_id: str | None = None,
) -> InstructorConflict | None:
    """Return the first running class that already occupies this instructor.

    Names are compared trimmed and case-insensitively. *exclude_class_id*
    skips the class being edited.
    """
    teacher = teacher_name.strip().lower()
    new_start = time_to_minutes(start_time)
    new_end = time_to_minutes(end_time)
    new_days = CLASS_PATTERN_DAYS[schedule_pattern]

    for cls in classes:
        if cls.id == exclude_class_id or cls.status in _INACTIVE_CLASS_STATUSES:
            continue
        if cls.teacher_name.strip().lower() != teacher:
            continue

        existing_days = CLASS_PATTERN_DAYS[cls.schedule_pattern]
        common_days = [d for d in new_days if d in existing_days]
        if not common_days:
            continue

        existing_start = time_to_minutes(cls.start_time)
        existing_end = time_to_minutes(cls.end_time)
        if not time_ranges_overlap(new_start, new_end, existing_start, existing_end):
            continue

        return InstructorConflict(
            teacher_name=cls.teacher_name,
            existing_class=cls,
            common_days=common_days,
            overlap_minutes=overlap_minutes(
                new_start, new_end, existing_start, existing_end
            ),
            message=(
                f"Schedule conflict detected: {cls.teacher_name} is already teaching "
                f"{cls.subject_name} "
                f"({_format_slot(cls.schedule_pattern, cls.start_time, cls.end_time)}) "
                "which overlaps with this class timing "
                f"({_format_slot(schedule_pattern, start_time, end_time)})."
            ),
        )
    return None

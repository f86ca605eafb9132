"""Schedule pattern tables and expansion of weekly passes into class dates."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from dateutil.rrule import FR, MO, SA, SU, TH, TU, WE, WEEKLY, rrule

from app import config
from app.domain.models import (
    BusinessVertical,
    ClassPatternCode,
    ScheduleEntry,
    ScheduleEntryStatus,
    SchedulePattern,
    StudentPass,
    Weekday,
)

_DAY_MAP = {
    Weekday.MON: MO,
    Weekday.TUE: TU,
    Weekday.WED: WE,
    Weekday.THU: TH,
    Weekday.FRI: FR,
    Weekday.SAT: SA,
    Weekday.SUN: SU,
}

_MON_TO_FRI = [Weekday.MON, Weekday.TUE, Weekday.WED, Weekday.THU, Weekday.FRI]

# Batch patterns shown to students. CUSTOM resolves through the batch's own days.
BATCH_PATTERN_DAYS: dict[SchedulePattern, list[Weekday]] = {
    SchedulePattern.MWF: [Weekday.MON, Weekday.WED, Weekday.FRI],
    SchedulePattern.TTS: [Weekday.TUE, Weekday.THU, Weekday.SAT],
    SchedulePattern.DAILY: [*_MON_TO_FRI, Weekday.SAT],
}

# Class patterns used by businesses when managing their timetable.
CLASS_PATTERN_DAYS: dict[ClassPatternCode, list[Weekday]] = {
    ClassPatternCode.MWF: [Weekday.MON, Weekday.WED, Weekday.FRI],
    ClassPatternCode.TTS: [Weekday.TUE, Weekday.THU, Weekday.SAT],
    ClassPatternCode.SS: [Weekday.SAT, Weekday.SUN],
    ClassPatternCode.MTWTF: list(_MON_TO_FRI),
    ClassPatternCode.MTWTFSS: [*_MON_TO_FRI, Weekday.SAT, Weekday.SUN],
    ClassPatternCode.MTWTFS: [*_MON_TO_FRI, Weekday.SAT],
}

CLASS_PATTERN_LABELS: dict[ClassPatternCode, str] = {
    ClassPatternCode.MWF: "Monday, Wednesday, Friday",
    ClassPatternCode.TTS: "Tuesday, Thursday, Saturday",
    ClassPatternCode.SS: "Saturday, Sunday",
    ClassPatternCode.MTWTF: "Monday to Friday",
    ClassPatternCode.MTWTFSS: "All Days",
    ClassPatternCode.MTWTFS: "Monday to Saturday",
}


def expand_pass_schedule(
    pass_: StudentPass,
    today: date,
    until: date | None = None,
) -> list[ScheduleEntry]:
    """Expand a coaching pass into its concrete class dates.

    The window runs from the pass's ``start_date`` to ``until``, else its
    ``end_date``, else ``SCHEDULE_HORIZON_DAYS`` after the start. Dates before
    *today* are marked completed. Returns ``[]`` for passes that carry no
    weekly slot.
    """
    if pass_.business_vertical != BusinessVertical.COACHING:
        return []
    if not pass_.schedule_days or not pass_.start_date:
        return []
    if not pass_.slot_start_time or not pass_.slot_end_time:
        return []

    last_day = until or pass_.end_date
    if last_day is None:
        last_day = pass_.start_date + timedelta(days=config.SCHEDULE_HORIZON_DAYS)
    if last_day < pass_.start_date:
        return []

    rule = rrule(
        WEEKLY,
        byweekday=[_DAY_MAP[d] for d in pass_.schedule_days],
        dtstart=datetime.combine(pass_.start_date, datetime.min.time()),
        until=datetime.combine(last_day, datetime.min.time()),
    )

    entries: list[ScheduleEntry] = []
    for dt in rule:
        class_date = dt.date()
        status = (
            ScheduleEntryStatus.COMPLETED
            if class_date < today
            else ScheduleEntryStatus.UPCOMING
        )
        entries.append(
            ScheduleEntry(
                class_date=class_date,
                pass_id=pass_.id,
                subject_name=pass_.subject_name,
                batch_name=pass_.batch_name,
                start_time=pass_.slot_start_time,
                end_time=pass_.slot_end_time,
                status=status,
            )
        )
    return entries

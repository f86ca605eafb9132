"""Tests for the pairwise conflict detector."""

from __future__ import annotations

from app.domain.models import (
    Candidate,
    ConflictType,
    OverlapShape,
    ScheduleItem,
    ScheduleSource,
    Weekday,
)
from app.domain.relations import BackToBack, DisjointDays, SeparatedTimes, TimeOverlap
from app.services.conflicts import check_schedule_conflicts, classify_pair
from app.services.time_utils import time_to_minutes

MON, TUE, WED, THU, FRI = Weekday.MON, Weekday.TUE, Weekday.WED, Weekday.THU, Weekday.FRI
MWF = [MON, WED, FRI]


def _make_existing(
    start: str = "17:00",
    end: str = "19:00",
    days: list[Weekday] | None = None,
    **overrides,
) -> ScheduleItem:
    fields = dict(
        id="e1",
        label="Mathematics Batch A",
        business_id="biz-alpha",
        business_name="Alpha Academy",
        subject_id="math",
        subject_name="Mathematics",
        batch_id="b-math-a",
        schedule_days=days if days is not None else MWF,
        start_minutes=time_to_minutes(start),
        end_minutes=time_to_minutes(end),
        source=ScheduleSource.ENROLLMENT,
    )
    fields.update(overrides)
    return ScheduleItem(**fields)


def _make_candidate(
    start: str = "16:00",
    end: str = "18:00",
    days: list[Weekday] | None = None,
    **overrides,
) -> Candidate:
    fields = dict(
        batch_id="b-phy-a",
        subject_id="physics",
        subject_name="Physics",
        business_id="biz-alpha",
        business_name="Alpha Academy",
        schedule_days=days if days is not None else MWF,
        start_time=start,
        end_time=end,
    )
    fields.update(overrides)
    return Candidate(**fields)


# ---------------------------------------------------------------------------
# Time overlap
# ---------------------------------------------------------------------------


def test_partial_overlap_on_all_shared_days():
    """MWF 16-18 against MWF 17-19 overlaps for one hour on every day."""
    result = check_schedule_conflicts(_make_candidate(), [_make_existing()])

    assert result.has_conflict is True
    assert len(result.conflicts) == 1
    detail = result.conflicts[0]
    assert detail.type == ConflictType.TIME_OVERLAP
    assert detail.overlap_days == [MON, WED, FRI]
    assert detail.overlap_minutes_amount == 60
    assert detail.overlap_time_range == "5:00 PM - 6:00 PM"
    assert detail.message == (
        "Cannot add Physics to cart. This batch runs Monday, Wednesday, Friday from "
        "4:00 PM to 6:00 PM, which overlaps with your Mathematics Batch A "
        "(5:00 PM-7:00 PM) at Alpha Academy by 1 hour. The classes overlap from "
        "5:00 PM - 6:00 PM."
    )
    assert result.info_messages == []


def test_overlap_days_are_only_the_shared_days():
    result = check_schedule_conflicts(
        _make_candidate(days=[MON, TUE]), [_make_existing(days=[MON, WED])]
    )
    assert result.conflicts[0].overlap_days == [MON]


def test_short_overlap_reported_in_minutes():
    result = check_schedule_conflicts(
        _make_candidate(start="10:30", end="11:30"),
        [_make_existing(start="10:00", end="11:00")],
    )
    detail = result.conflicts[0]
    assert detail.overlap_minutes_amount == 30
    assert "by 30 minutes" in detail.message


def test_exact_same_schedule_message():
    result = check_schedule_conflicts(
        _make_candidate(start="17:00", end="19:00"), [_make_existing()]
    )
    assert "which is the exact same schedule as your Mathematics Batch A" in (
        result.conflicts[0].message
    )


def test_candidate_within_existing_message():
    result = check_schedule_conflicts(
        _make_candidate(start="17:30", end="18:30"), [_make_existing()]
    )
    assert "falls completely within your Mathematics Batch A (5:00 PM-7:00 PM)" in (
        result.conflicts[0].message
    )


def test_candidate_encompasses_existing_message():
    result = check_schedule_conflicts(
        _make_candidate(start="16:00", end="20:00"), [_make_existing()]
    )
    assert "completely encompasses your Mathematics Batch A" in result.conflicts[0].message


def test_missing_subject_name_falls_back_to_this_batch():
    result = check_schedule_conflicts(
        _make_candidate(subject_name=None), [_make_existing()]
    )
    assert result.conflicts[0].message.startswith("Cannot add this batch to cart.")


# ---------------------------------------------------------------------------
# Day disjointness
# ---------------------------------------------------------------------------


def test_different_days_no_conflict_and_no_message():
    result = check_schedule_conflicts(
        _make_candidate(start="09:00", end="10:00", days=[TUE, THU]),
        [_make_existing(start="09:00", end="10:00")],
    )
    assert result.has_conflict is False
    assert result.conflicts == []
    assert result.info_messages == []


def test_disjoint_days_never_produce_time_overlap():
    for start, end in [("17:00", "19:00"), ("16:00", "20:00"), ("18:00", "18:30")]:
        result = check_schedule_conflicts(
            _make_candidate(start=start, end=end, days=[TUE, THU]),
            [_make_existing()],
        )
        assert all(c.type != ConflictType.TIME_OVERLAP for c in result.conflicts)


def test_same_subject_other_center_on_other_days_is_informational():
    result = check_schedule_conflicts(
        _make_candidate(
            subject_id="math",
            subject_name="Mathematics",
            business_id="biz-beta",
            business_name="Beta Tutorials",
            days=[TUE, THU],
        ),
        [_make_existing()],
    )
    assert result.has_conflict is False
    assert result.info_messages == [
        "ℹ️ Note: You are enrolling in Mathematics at two different coaching centers "
        "(Beta Tutorials and Alpha Academy). This is allowed but verify if you need both."
    ]


def test_same_subject_other_center_with_overlap_is_a_time_conflict():
    result = check_schedule_conflicts(
        _make_candidate(
            subject_id="math",
            business_id="biz-beta",
            business_name="Beta Tutorials",
        ),
        [_make_existing()],
    )
    assert [c.type for c in result.conflicts] == [ConflictType.TIME_OVERLAP]
    assert result.info_messages == []


# ---------------------------------------------------------------------------
# Back-to-back
# ---------------------------------------------------------------------------


def test_back_to_back_same_center_confirms_consecutive_classes():
    result = check_schedule_conflicts(
        _make_candidate(start="18:00", end="19:00", days=[MON]),
        [_make_existing(start="17:00", end="18:00", days=[MON])],
    )
    assert result.has_conflict is False
    assert result.info_messages == [
        "✓ No conflict. Physics starts right after Mathematics Batch A ends. "
        "You'll have consecutive classes on Monday."
    ]


def test_back_to_back_candidate_first():
    result = check_schedule_conflicts(
        _make_candidate(start="16:00", end="17:00", days=[MON, WED]),
        [_make_existing(start="17:00", end="18:00", days=[MON, WED])],
    )
    assert result.info_messages == [
        "✓ No conflict. Mathematics Batch A starts right after Physics ends. "
        "You'll have consecutive classes on Monday, Wednesday."
    ]


def test_back_to_back_different_locations_warns_about_travel():
    result = check_schedule_conflicts(
        _make_candidate(
            start="19:00",
            end="20:00",
            business_id="biz-beta",
            business_name="Beta Tutorials",
        ),
        [_make_existing()],
    )
    assert result.has_conflict is False
    assert result.info_messages == [
        "ℹ️ Note: These classes are at different locations (Beta Tutorials and "
        "Alpha Academy) with no gap between them. Ensure you can travel between "
        "locations in time."
    ]


def test_separated_slots_are_silent():
    result = check_schedule_conflicts(
        _make_candidate(start="19:30", end="20:30"), [_make_existing()]
    )
    assert result.has_conflict is False
    assert result.info_messages == []


# ---------------------------------------------------------------------------
# Duplicate batch / same subject same center
# ---------------------------------------------------------------------------


def test_duplicate_batch_in_cart_ignores_time_fields():
    existing = _make_existing(batch_id="b1", source=ScheduleSource.CART)
    result = check_schedule_conflicts(
        _make_candidate(batch_id="b1", start="06:00", end="07:00", days=[TUE]),
        [existing],
    )
    assert len(result.conflicts) == 1
    detail = result.conflicts[0]
    assert detail.type == ConflictType.DUPLICATE_BATCH
    assert detail.overlap_minutes_amount == 0
    assert detail.overlap_days == [TUE]
    assert detail.message == (
        'You already have "Mathematics Batch A" in your cart. '
        "You cannot add the same batch twice."
    )


def test_duplicate_batch_dominates_other_rules():
    existing = _make_existing(batch_id="b1")
    result = check_schedule_conflicts(
        _make_candidate(batch_id="b1", subject_id="math", start="17:00", end="19:00"),
        [existing],
    )
    assert [c.type for c in result.conflicts] == [ConflictType.DUPLICATE_BATCH]
    assert "enrolled" in result.conflicts[0].message


def test_same_subject_same_center_blocks_on_any_days():
    result = check_schedule_conflicts(
        _make_candidate(subject_id="math", subject_name="Mathematics", days=[TUE, THU]),
        [_make_existing()],
    )
    assert [c.type for c in result.conflicts] == [ConflictType.SAME_SUBJECT_SAME_CENTER]
    assert result.conflicts[0].message.startswith(
        'Cannot add Mathematics — you already have "Mathematics Batch A" at Alpha Academy.'
    )


def test_missing_batch_ids_are_not_duplicates():
    result = check_schedule_conflicts(
        _make_candidate(batch_id=None, days=[TUE]),
        [_make_existing(batch_id=None)],
    )
    assert result.conflicts == []


# ---------------------------------------------------------------------------
# Aggregation and classification
# ---------------------------------------------------------------------------


def test_all_conflicts_returned_in_input_order():
    existing = [
        _make_existing(id="e1", subject_id="chem", batch_id="b-chem"),
        _make_existing(id="e2", subject_id="bio", batch_id="b-bio", start="15:00", end="16:30"),
        _make_existing(id="e3", subject_id="eng", batch_id="b-eng", start="20:00", end="21:00"),
    ]
    result = check_schedule_conflicts(_make_candidate(), existing)
    assert [c.conflicting_item.id for c in result.conflicts] == ["e1", "e2"]


def test_empty_candidate_days_never_time_conflict():
    result = check_schedule_conflicts(_make_candidate(days=[]), [_make_existing()])
    assert result.has_conflict is False


def test_identical_inputs_give_identical_output():
    first = check_schedule_conflicts(_make_candidate(), [_make_existing()])
    second = check_schedule_conflicts(_make_candidate(), [_make_existing()])
    assert first.model_dump() == second.model_dump()


def test_classify_pair_variants():
    existing = _make_existing()
    assert classify_pair(_make_candidate(days=[TUE]), 960, 1080, existing) == DisjointDays(
        same_subject_elsewhere=False
    )
    assert classify_pair(_make_candidate(), 1140, 1200, existing) == BackToBack(
        common_days=MWF, candidate_first=False, same_business=True
    )
    assert classify_pair(_make_candidate(), 1200, 1260, existing) == SeparatedTimes(
        common_days=MWF, gap_minutes=60
    )
    overlap = classify_pair(_make_candidate(), 960, 1080, existing)
    assert isinstance(overlap, TimeOverlap)
    assert overlap.shape == OverlapShape.PARTIAL
    assert overlap.minutes == 60

"""How a candidate slot relates to one existing schedule item.

The detector classifies every (candidate, existing) pair into exactly one of
these variants before deciding whether it blocks, informs, or is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.domain.models import OverlapShape, Weekday


@dataclass(frozen=True)
class DuplicateBatch:
    """Candidate is the very batch the student already holds."""


@dataclass(frozen=True)
class SameSubjectSameCenter:
    """Same subject at the same venue, regardless of timing."""


@dataclass(frozen=True)
class DisjointDays:
    same_subject_elsewhere: bool


@dataclass(frozen=True)
class SeparatedTimes:
    common_days: list[Weekday]
    gap_minutes: int


@dataclass(frozen=True)
class BackToBack:
    common_days: list[Weekday]
    candidate_first: bool
    same_business: bool


@dataclass(frozen=True)
class TimeOverlap:
    common_days: list[Weekday]
    overlap_start: int
    overlap_end: int
    shape: OverlapShape

    @property
    def minutes(self) -> int:
        return self.overlap_end - self.overlap_start


PairRelation = (
    DuplicateBatch
    | SameSubjectSameCenter
    | DisjointDays
    | SeparatedTimes
    | BackToBack
    | TimeOverlap
)

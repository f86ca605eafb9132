"""Domain models for the coaching schedule conflict engine."""

from __future__ import annotations

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, Field, field_serializer, model_validator


class Weekday(StrEnum):
    MON = "mon"
    TUE = "tue"
    WED = "wed"
    THU = "thu"
    FRI = "fri"
    SAT = "sat"
    SUN = "sun"


class BusinessVertical(StrEnum):
    COACHING = "coaching"
    GYM = "gym"
    LIBRARY = "library"


class PassStatus(StrEnum):
    RESERVED = "reserved"
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    PAUSED = "paused"


class SchedulePattern(StrEnum):
    MWF = "mwf"
    TTS = "tts"
    DAILY = "daily"
    CUSTOM = "custom"


class ClassPatternCode(StrEnum):
    MWF = "mwf"
    TTS = "tts"
    SS = "ss"
    MTWTF = "mtwtf"
    MTWTFSS = "mtwtfss"
    MTWTFS = "mtwtfs"


class ClassStatus(StrEnum):
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ScheduleSource(StrEnum):
    CART = "cart"
    ENROLLMENT = "enrollment"


class ConflictType(StrEnum):
    DUPLICATE_BATCH = "duplicate_batch"
    SAME_SUBJECT_SAME_CENTER = "same_subject_same_center"
    TIME_OVERLAP = "time_overlap"


class OverlapShape(StrEnum):
    EXACT = "exact"
    CANDIDATE_WITHIN = "candidate_within"
    EXISTING_WITHIN = "existing_within"
    PARTIAL = "partial"


class ScheduleEntryStatus(StrEnum):
    UPCOMING = "upcoming"
    COMPLETED = "completed"


# Statuses whose passes still occupy a seat in the student's week.
BLOCKING_PASS_STATUSES = frozenset({PassStatus.ACTIVE, PassStatus.RESERVED})


# ---------------------------------------------------------------------------
# Marketplace records (owned by external collaborators)
# ---------------------------------------------------------------------------


class CartItem(BaseModel):
    id: str
    business_id: str
    business_name: str
    business_vertical: BusinessVertical
    # Coaching
    subject_id: str | None = None
    subject_name: str | None = None
    batch_id: str | None = None
    batch_name: str | None = None
    schedule_pattern: SchedulePattern | None = None
    schedule_days: list[Weekday] | None = None
    slot_time: str | None = None
    instructor_name: str | None = None
    duration_hours: int | None = None
    # Gym/Library
    pass_template_id: str | None = None
    time_segment_name: str | None = None
    # Common
    price: float = 0
    start_date: date | None = None
    auto_renew: bool = False


class StudentPass(BaseModel):
    id: str
    business_id: str
    business_name: str
    business_vertical: BusinessVertical
    status: PassStatus
    # Coaching
    subject_id: str | None = None
    subject_name: str | None = None
    batch_id: str | None = None
    batch_name: str | None = None
    schedule_pattern: SchedulePattern | None = None
    schedule_days: list[Weekday] | None = None
    slot_start_time: str | None = None
    slot_end_time: str | None = None
    instructor_name: str | None = None
    # Gym/Library
    pass_template_id: str | None = None
    # Common
    start_date: date | None = None
    end_date: date | None = None
    switch_used: bool = False


class Batch(BaseModel):
    id: str
    subject_id: str
    business_id: str
    name: str
    schedule_pattern: SchedulePattern
    custom_days: list[Weekday] | None = None
    start_time: str
    end_time: str
    capacity: int = Field(ge=0)
    enrolled: int = Field(default=0, ge=0)
    instructor_name: str
    is_paused: bool = False


class Subject(BaseModel):
    id: str
    name: str
    batches: list[Batch] = Field(default_factory=list)


class Business(BaseModel):
    id: str
    name: str
    vertical: BusinessVertical
    subjects: list[Subject] = Field(default_factory=list)


class CoachingClass(BaseModel):
    id: str
    business_id: str
    subject_name: str
    teacher_name: str
    batch_name: str
    schedule_pattern: ClassPatternCode
    start_time: str
    end_time: str
    status: ClassStatus = ClassStatus.SCHEDULED


# ---------------------------------------------------------------------------
# Engine types
# ---------------------------------------------------------------------------


class ScheduleItem(BaseModel):
    id: str
    label: str
    business_id: str
    business_name: str
    subject_id: str | None = None
    subject_name: str | None = None
    batch_id: str | None = None
    schedule_days: list[Weekday]
    start_minutes: int = Field(ge=0, le=1440)
    end_minutes: int = Field(ge=0, le=1440)
    source: ScheduleSource

    @model_validator(mode="after")
    def _end_after_start(self) -> ScheduleItem:
        if self.end_minutes <= self.start_minutes:
            raise ValueError("end_minutes must be after start_minutes")
        return self


class Candidate(BaseModel):
    batch_id: str | None = None
    subject_id: str | None = None
    subject_name: str | None = None
    business_id: str
    business_name: str
    schedule_days: list[Weekday]
    start_time: str
    end_time: str


class ConflictDetail(BaseModel):
    type: ConflictType
    conflicting_item: ScheduleItem
    overlap_days: list[Weekday]
    overlap_minutes_amount: int = 0
    message: str
    overlap_time_range: str | None = None


class ConflictCheckResult(BaseModel):
    has_conflict: bool = False
    conflicts: list[ConflictDetail] = Field(default_factory=list)
    info_messages: list[str] = Field(default_factory=list)


class CartPairConflict(BaseModel):
    item_a: CartItem
    item_b: CartItem
    detail: ConflictDetail


class EnrollmentConflict(BaseModel):
    cart_item: CartItem
    detail: ConflictDetail


class CartValidationResult(BaseModel):
    has_conflicts: bool = False
    cart_pair_conflicts: list[CartPairConflict] = Field(default_factory=list)
    enrollment_conflicts: list[EnrollmentConflict] = Field(default_factory=list)
    conflicting_item_ids: set[str] = Field(default_factory=set)
    info_messages: list[str] = Field(default_factory=list)

    @field_serializer("conflicting_item_ids")
    def _sorted_ids(self, ids: set[str]) -> list[str]:
        return sorted(ids)


class ConflictInfo(BaseModel):
    """Outcome of checking a single item before it is added to the cart."""

    has_conflict: bool = False
    conflicting_item_id: str | None = None
    conflict_days: list[Weekday] = Field(default_factory=list)
    conflict_time: str | None = None
    result: ConflictCheckResult | None = None


class InstructorConflict(BaseModel):
    teacher_name: str
    existing_class: CoachingClass
    common_days: list[Weekday]
    overlap_minutes: int
    message: str


class ScheduleEntry(BaseModel):
    class_date: date
    pass_id: str
    subject_name: str | None = None
    batch_name: str | None = None
    start_time: str
    end_time: str
    status: ScheduleEntryStatus


# ---------------------------------------------------------------------------
# Request DTOs
# ---------------------------------------------------------------------------


class CheckConflictsRequest(BaseModel):
    candidate: Candidate
    existing_items: list[ScheduleItem] = Field(default_factory=list)


class ValidateCartRequest(BaseModel):
    cart: list[CartItem] = Field(default_factory=list)
    passes: list[StudentPass] = Field(default_factory=list)


class CheckCartItemRequest(BaseModel):
    item: CartItem
    cart: list[CartItem] = Field(default_factory=list)
    passes: list[StudentPass] = Field(default_factory=list)


class CheckBatchRequest(BaseModel):
    batch: Batch
    subject_id: str
    subject_name: str
    business_id: str
    business_name: str
    cart: list[CartItem] = Field(default_factory=list)
    passes: list[StudentPass] = Field(default_factory=list)


class BatchConflictMapRequest(BaseModel):
    business: Business
    cart: list[CartItem] = Field(default_factory=list)
    passes: list[StudentPass] = Field(default_factory=list)


class InstructorConflictRequest(BaseModel):
    teacher_name: str
    schedule_pattern: ClassPatternCode
    start_time: str
    end_time: str
    classes: list[CoachingClass] = Field(default_factory=list)
    exclude_class_id: str | None = None


class PassScheduleRequest(BaseModel):
    student_pass: StudentPass
    today: date
    until: date | None = None

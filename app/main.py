"""FastAPI application: stateless HTTP surface over the conflict engine.

Every request carries the full cart / pass snapshot it needs; nothing is
stored between calls.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException

from app import config
from app.domain.models import (
    BatchConflictMapRequest,
    CartValidationResult,
    CheckBatchRequest,
    CheckCartItemRequest,
    CheckConflictsRequest,
    ConflictCheckResult,
    ConflictInfo,
    InstructorConflict,
    InstructorConflictRequest,
    PassScheduleRequest,
    ScheduleEntry,
    ValidateCartRequest,
)
from app.services.batches import build_batch_conflict_map, check_batch_conflict
from app.services.cart import check_cart_addition, validate_cart
from app.services.conflicts import check_schedule_conflicts
from app.services.instructors import check_instructor_conflict
from app.services.recurrence import expand_pass_schedule
from app.services.time_utils import time_to_minutes

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=config.API_TITLE)


# ── Routes ────────────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/conflicts/check", response_model=ConflictCheckResult)
def check_conflicts(payload: CheckConflictsRequest) -> ConflictCheckResult:
    """Check one candidate slot against already-normalized schedule items."""
    candidate = payload.candidate
    if time_to_minutes(candidate.end_time) <= time_to_minutes(candidate.start_time):
        raise HTTPException(
            status_code=400,
            detail="Candidate end_time must be after start_time",
        )
    return check_schedule_conflicts(candidate, payload.existing_items)


@app.post("/cart/validate", response_model=CartValidationResult)
def validate(payload: ValidateCartRequest) -> CartValidationResult:
    """Validate the whole cart against itself and the student's passes."""
    result = validate_cart(payload.cart, payload.passes)
    if result.has_conflicts:
        logger.info(
            "Cart blocked: %d conflicting items", len(result.conflicting_item_ids)
        )
    return result


@app.post("/cart/check-item", response_model=ConflictInfo)
def check_cart_item(payload: CheckCartItemRequest) -> ConflictInfo:
    """Check a single item before it is added to the cart."""
    return check_cart_addition(payload.item, payload.cart, payload.passes)


@app.post("/batches/check", response_model=ConflictCheckResult)
def check_batch(payload: CheckBatchRequest) -> ConflictCheckResult:
    return check_batch_conflict(
        payload.batch,
        payload.subject_id,
        payload.subject_name,
        payload.business_id,
        payload.business_name,
        payload.cart,
        payload.passes,
    )


@app.post(
    "/businesses/batch-conflicts",
    response_model=dict[str, ConflictCheckResult],
)
def batch_conflicts(payload: BatchConflictMapRequest) -> dict[str, ConflictCheckResult]:
    """Return a conflict result for every batch the business offers."""
    return build_batch_conflict_map(payload.business, payload.cart, payload.passes)


@app.post(
    "/classes/instructor-conflict",
    response_model=InstructorConflict | None,
)
def instructor_conflict(payload: InstructorConflictRequest) -> InstructorConflict | None:
    return check_instructor_conflict(
        payload.teacher_name,
        payload.schedule_pattern,
        payload.start_time,
        payload.end_time,
        payload.classes,
        exclude_class_id=payload.exclude_class_id,
    )


@app.post("/passes/schedule", response_model=list[ScheduleEntry])
def pass_schedule(payload: PassScheduleRequest) -> list[ScheduleEntry]:
    """Expand a coaching pass into its class dates."""
    return expand_pass_schedule(payload.student_pass, payload.today, until=payload.until)

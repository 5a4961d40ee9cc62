"""Booking creation, update and removal.

Every write path validates the whole submission first and commits once, so
callers never observe a booking with a partially reconciled detail set.
"""

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from campus_booking.db import commit, rollback
from campus_booking.models.booking import Booking, BookingDetail
from campus_booking.models.room import Room
from campus_booking.models.user import User
from campus_booking.schemas.booking import BookingDetailIn, BookingIn
from campus_booking.services.reconciliation import plan_reconciliation
from campus_booking.utils.errors import BookingValidationError, ErrorBag, NotFoundError

logger = logging.getLogger(__name__)


def _day_start(value: date) -> datetime:
    return datetime.combine(value, datetime.min.time())


def validate_booking(
    db: Session,
    tgl: date,
    details: Sequence[BookingDetailIn],
    booking_id: Optional[int] = None,
):
    """Raise BookingValidationError listing every problem with the submission."""
    errors = ErrorBag()
    if not details:
        errors.add("booking_details", "At least one booking detail is required.")

    room_ids = {detail.room_id for detail in details}
    known_rooms = set()
    if room_ids:
        known_rooms = {row.id for row in db.query(Room.id).filter(Room.id.in_(room_ids))}

    owned_ids = set()
    if booking_id is not None:
        owned_ids = {
            row.id for row in db.query(BookingDetail.id).filter(BookingDetail.booking_id == booking_id)
        }

    earliest = _day_start(tgl)
    seen_ids = set()
    for index, detail in enumerate(details):
        prefix = f"booking_details.{index}"
        if detail.id is not None and detail.id not in owned_ids:
            errors.add(f"{prefix}.id", "The selected booking detail is invalid.")
        elif detail.id is not None and detail.id in seen_ids:
            errors.add(f"{prefix}.id", "The booking detail has already been submitted.")
        if detail.id is not None:
            seen_ids.add(detail.id)
        if detail.room_id not in known_rooms:
            errors.add(f"{prefix}.room_id", "The selected room does not exist.")
        if detail.start < earliest:
            errors.add(f"{prefix}.start", "The start must be a date after or equal to the booking date.")
        if detail.end <= detail.start:
            errors.add(f"{prefix}.end", "The end must be a date after start.")

    if errors:
        logger.error(f"Booking validation failed: {errors.errors}")
    errors.raise_if_any(BookingValidationError)


def _booking_query(db: Session):
    return db.query(Booking).options(
        selectinload(Booking.user),
        selectinload(Booking.booking_details).selectinload(BookingDetail.room),
    )


def get_booking(db: Session, booking_id: int) -> Booking:
    booking = _booking_query(db).filter(Booking.id == booking_id).first()
    if not booking:
        logger.error(f"Booking not found: {booking_id}")
        raise NotFoundError("Booking")
    return booking


def list_bookings(db: Session, search: Optional[str] = None, skip: int = 0, limit: int = 10):
    query = _booking_query(db)
    if search:
        pattern = f"%{search}%"
        query = query.outerjoin(User, Booking.user_id == User.id).filter(
            or_(Booking.customer_name.like(pattern), User.name.like(pattern))
        )
    return query.order_by(Booking.created_at.desc(), Booking.id.desc()).offset(skip).limit(limit).all()


def create_booking(db: Session, payload: BookingIn, actor_id: int) -> Booking:
    """Insert a booking owned by ``actor_id`` together with all of its details."""
    details = [entry.model_copy(update={"id": None}) for entry in payload.booking_details]
    validate_booking(db, payload.tgl, details)

    try:
        booking = Booking(tgl=payload.tgl, customer_name=payload.customer_name, user_id=actor_id)
        db.add(booking)
        db.flush()
        db.add_all(
            BookingDetail(booking_id=booking.id, room_id=entry.room_id, start=entry.start, end=entry.end)
            for entry in details
        )
        commit(db)
    except Exception:
        rollback(db)
        raise

    logger.debug(f"Created booking: {booking.id} with {len(details)} details for user {actor_id}")
    return get_booking(db, booking.id)


def update_booking(db: Session, booking_id: int, payload: BookingIn) -> Booking:
    """Update the booking header and reconcile its details with the submission."""
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        logger.error(f"Booking not found: {booking_id}")
        raise NotFoundError("Booking")

    validate_booking(db, payload.tgl, payload.booking_details, booking_id=booking_id)

    try:
        booking.tgl = payload.tgl
        booking.customer_name = payload.customer_name

        existing_ids = [
            row.id for row in db.query(BookingDetail.id).filter(BookingDetail.booking_id == booking_id)
        ]
        plan = plan_reconciliation(existing_ids, payload.booking_details)

        if plan.to_delete:
            db.query(BookingDetail).filter(
                BookingDetail.booking_id == booking_id,
                BookingDetail.id.in_(plan.to_delete),
            ).delete(synchronize_session=False)

        for entry in plan.to_update:
            # scoped to this booking so a foreign detail id can never be touched
            db.query(BookingDetail).filter(
                BookingDetail.id == entry.id,
                BookingDetail.booking_id == booking_id,
            ).update(
                {"room_id": entry.room_id, "start": entry.start, "end": entry.end},
                synchronize_session=False,
            )

        db.add_all(
            BookingDetail(booking_id=booking_id, room_id=entry.room_id, start=entry.start, end=entry.end)
            for entry in plan.to_insert
        )
        commit(db)
    except Exception:
        rollback(db)
        raise

    logger.debug(
        f"Updated booking: {booking_id}, deleted={sorted(plan.to_delete)}, "
        f"updated={sorted(plan.updated_ids)}, inserted={len(plan.to_insert)}"
    )
    return get_booking(db, booking_id)


def delete_booking(db: Session, booking_id: int):
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        logger.error(f"Booking not found: {booking_id}")
        raise NotFoundError("Booking")

    try:
        db.delete(booking)
        commit(db)
    except Exception:
        rollback(db)
        raise
    logger.debug(f"Deleted booking: {booking_id}")

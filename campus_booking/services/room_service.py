import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from campus_booking.db import commit, rollback
from campus_booking.models.booking import BookingDetail
from campus_booking.models.room import Room
from campus_booking.schemas.room import RoomCreate, RoomUpdate
from campus_booking.utils.errors import ErrorBag, NotFoundError, ValidationError
from campus_booking.utils.storage import (
    PHOTO_CONTENT_TYPES,
    PHOTO_DIRECTORY,
    PHOTO_MAX_BYTES,
    PhotoDisk,
    delete_after_commit,
)

logger = logging.getLogger(__name__)


class PhotoUpload:
    """An uploaded photo already read into memory."""

    def __init__(self, content: bytes, content_type: Optional[str], filename: Optional[str] = None):
        self.content = content
        self.content_type = content_type
        self.filename = filename


def validate_photo(photo: PhotoUpload):
    errors = ErrorBag()
    if photo.content_type not in PHOTO_CONTENT_TYPES:
        errors.add("photo", "The photo must be a file of type: jpeg, png, jpg, gif.")
    elif len(photo.content) > PHOTO_MAX_BYTES:
        errors.add("photo", "The photo may not be greater than 2048 kilobytes.")
    errors.raise_if_any()


def _store_photo(disk: PhotoDisk, photo: PhotoUpload) -> str:
    return disk.store(photo.content, PHOTO_DIRECTORY, PHOTO_CONTENT_TYPES[photo.content_type])


def list_rooms(
    db: Session,
    search: Optional[str] = None,
    status: Optional[str] = None,
    skip: int = 0,
    limit: int = 10,
):
    query = db.query(Room)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Room.name.like(pattern), Room.faculty_name.like(pattern)))
    if status:
        query = query.filter(Room.status == status)
    return query.order_by(Room.created_at.desc(), Room.id.desc()).offset(skip).limit(limit).all()


def get_room(db: Session, room_id: int) -> Room:
    room = db.query(Room).filter(Room.id == room_id).first()
    if not room:
        logger.error(f"Room not found: {room_id}")
        raise NotFoundError("Room")
    return room


def create_room(db: Session, disk: PhotoDisk, data: RoomCreate, photo: Optional[PhotoUpload] = None) -> Room:
    if photo is not None:
        validate_photo(photo)

    room = Room(**data.model_dump())
    stored = None
    try:
        if photo is not None:
            stored = _store_photo(disk, photo)
            room.photo = stored
        db.add(room)
        commit(db)
    except Exception:
        rollback(db)
        # the row never landed, so the new file is orphaned
        if stored:
            disk.delete(stored)
        raise

    db.refresh(room)
    logger.debug(f"Created room: {room.id}, status: {room.status}")
    return room


def update_room(
    db: Session,
    disk: PhotoDisk,
    room_id: int,
    data: RoomUpdate,
    photo: Optional[PhotoUpload] = None,
) -> Room:
    """
    Apply a partial update. Status moves freely between draft, approved and
    rejected. A new photo replaces the stored one; the previous file is
    removed only after the row change is committed.
    """
    room = get_room(db, room_id)
    if photo is not None:
        validate_photo(photo)

    stored = None
    try:
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(room, key, value)
        if photo is not None:
            stored = _store_photo(disk, photo)
            delete_after_commit(db, disk, room.photo)
            room.photo = stored
        commit(db)
    except Exception:
        rollback(db)
        if stored:
            disk.delete(stored)
        raise

    db.refresh(room)
    logger.debug(f"Updated room: {room_id}")
    return room


def delete_room(db: Session, disk: PhotoDisk, room_id: int):
    """Delete a room and its photo. A room still referenced by bookings is refused."""
    room = get_room(db, room_id)
    if db.query(BookingDetail.id).filter(BookingDetail.room_id == room_id).first() is not None:
        logger.error(f"Room {room_id} is still used by bookings")
        raise ValidationError({"room": ["The room is still used by bookings and cannot be deleted."]})
    try:
        delete_after_commit(db, disk, room.photo)
        db.delete(room)
        commit(db)
    except Exception:
        rollback(db)
        raise
    logger.debug(f"Deleted room: {room_id}")

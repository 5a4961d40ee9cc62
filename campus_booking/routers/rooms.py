from typing import List, Optional
import pydantic
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session
from campus_booking.db import get_db
from campus_booking.schemas.room import RoomCreate, RoomResponse, RoomStatus, RoomUpdate
from campus_booking.services import room_service
from campus_booking.services.room_service import PhotoUpload
from campus_booking.utils.auth import get_current_user
from campus_booking.utils.errors import ValidationError, errors_from_pydantic
from campus_booking.utils.storage import PhotoDisk, get_photo_disk


router = APIRouter(
    prefix="/rooms",
    tags=["rooms"],
)


def _form_model(model, values: dict):
    try:
        return model(**{key: value for key, value in values.items() if value is not None})
    except pydantic.ValidationError as e:
        raise ValidationError(errors_from_pydantic(e.errors()))


def _room_response(room, disk: PhotoDisk) -> RoomResponse:
    return RoomResponse.model_validate(room).model_copy(update={"photo_url": disk.url(room.photo)})


async def _read_photo(photo: Optional[UploadFile]) -> Optional[PhotoUpload]:
    if photo is None or not photo.filename:
        return None
    return PhotoUpload(await photo.read(), photo.content_type, photo.filename)


@router.post("/", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
async def create_room(
    name: Optional[str] = Form(None),
    faculty_name: Optional[str] = Form(None),
    capacity: Optional[str] = Form(None),
    room_status: Optional[str] = Form(None, alias="status"),
    photo: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    disk: PhotoDisk = Depends(get_photo_disk),
    current_user: dict = Depends(get_current_user),
):
    """
    Create a room from a multipart form, with an optional jpeg/png/gif photo.
    Requires authentication.
    """
    data = _form_model(
        RoomCreate,
        {"name": name, "faculty_name": faculty_name, "capacity": capacity, "status": room_status},
    )
    room = room_service.create_room(db, disk, data, await _read_photo(photo))
    return _room_response(room, disk)


@router.get("/", response_model=List[RoomResponse])
def get_rooms(
    search: Optional[str] = None,
    room_status: Optional[RoomStatus] = Query(None, alias="status"),
    skip: int = 0,
    limit: int = 10,
    db: Session = Depends(get_db),
    disk: PhotoDisk = Depends(get_photo_disk),
):
    """
    List rooms, newest first. `search` matches the room or faculty name.
    """
    rooms = room_service.list_rooms(db, search=search, status=room_status, skip=skip, limit=limit)
    return [_room_response(room, disk) for room in rooms]


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(room_id: int, db: Session = Depends(get_db), disk: PhotoDisk = Depends(get_photo_disk)):
    """
    Retrieve a specific room by ID.
    """
    return _room_response(room_service.get_room(db, room_id), disk)


@router.put("/{room_id}", response_model=RoomResponse)
async def update_room(
    room_id: int,
    name: Optional[str] = Form(None),
    faculty_name: Optional[str] = Form(None),
    capacity: Optional[str] = Form(None),
    room_status: Optional[str] = Form(None, alias="status"),
    photo: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    disk: PhotoDisk = Depends(get_photo_disk),
    current_user: dict = Depends(get_current_user),
):
    """
    Update any subset of the room's fields. Uploading a photo replaces the old one.
    Requires authentication.
    """
    data = _form_model(
        RoomUpdate,
        {"name": name, "faculty_name": faculty_name, "capacity": capacity, "status": room_status},
    )
    room = room_service.update_room(db, disk, room_id, data, await _read_photo(photo))
    return _room_response(room, disk)


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room(
    room_id: int,
    db: Session = Depends(get_db),
    disk: PhotoDisk = Depends(get_photo_disk),
    current_user: dict = Depends(get_current_user),
):
    """
    Delete a room along with its stored photo.
    Rooms still referenced by booking details are refused with 422.
    Requires authentication.
    """
    room_service.delete_room(db, disk, room_id)
    return None

from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from campus_booking.db import get_db
from campus_booking.schemas.booking import BookingIn, BookingResponse
from campus_booking.services import booking_service
from campus_booking.utils.auth import get_current_user

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "/",
    response_model=List[BookingResponse],
    summary="List bookings",
    description="Newest first; `search` matches the customer name or the booking user's name.",
)
def get_bookings(search: Optional[str] = None, skip: int = 0, limit: int = 10, db: Session = Depends(get_db)):
    return booking_service.list_bookings(db, search=search, skip=skip, limit=limit)


@router.post(
    "/",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a booking",
    description="Create a booking for the authenticated user together with its room/time details.",
)
def create_booking(
    booking: BookingIn,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    - **tgl**: Booking date. Every detail must start on or after it.
    - **customer_name**: Optional customer the booking is made for.
    - **booking_details**: At least one `{room_id, start, end}` entry with `end` after `start`.

    Returns the booking with its details, or 422 with errors keyed like `booking_details.0.end`.
    """
    return booking_service.create_booking(db, booking, actor_id=current_user["id"])


@router.get("/{booking_id}", response_model=BookingResponse, summary="Get a booking by ID")
def get_booking(booking_id: int, db: Session = Depends(get_db)):
    return booking_service.get_booking(db, booking_id)


@router.put(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Update a booking",
    description="Update the booking and reconcile its details with the submitted list.",
)
def update_booking(booking_id: int, booking: BookingIn, db: Session = Depends(get_db)):
    """
    Details carrying an `id` are updated in place, details without one are
    inserted, and existing details left out of the list are deleted.
    The owning user is never changed.
    """
    return booking_service.update_booking(db, booking_id, booking)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a booking")
def delete_booking(booking_id: int, db: Session = Depends(get_db)):
    """
    Delete a booking. Its details are removed by the database cascade.
    """
    booking_service.delete_booking(db, booking_id)
    return None

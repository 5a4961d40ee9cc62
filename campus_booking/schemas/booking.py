from datetime import date, datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from campus_booking.schemas.room import RoomSummary
from campus_booking.schemas.user import UserSummary


class BookingDetailIn(BaseModel):
    id: Optional[int] = None
    room_id: int
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def as_naive_utc(cls, value: datetime) -> datetime:
        # stored columns are naive; aware input is normalised to UTC
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class BookingIn(BaseModel):
    """Payload shared by booking creation and update."""

    tgl: date
    customer_name: Optional[str] = Field(None, max_length=255)
    booking_details: List[BookingDetailIn] = []


class BookingDetailResponse(BaseModel):
    id: int
    room_id: int
    start: datetime
    end: datetime
    room: Optional[RoomSummary] = None

    model_config = ConfigDict(from_attributes=True)


class BookingResponse(BaseModel):
    id: int
    tgl: date
    customer_name: Optional[str] = None
    user_id: int
    user: Optional[UserSummary] = None
    booking_details: List[BookingDetailResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

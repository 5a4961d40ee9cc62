from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

RoomStatus = Literal["draft", "approved", "rejected"]


class RoomBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    faculty_name: str = Field(..., min_length=1, max_length=255)
    capacity: int = Field(..., ge=1)


class RoomCreate(RoomBase):
    status: RoomStatus = "draft"


class RoomUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    faculty_name: Optional[str] = Field(None, min_length=1, max_length=255)
    capacity: Optional[int] = Field(None, ge=1)
    status: Optional[RoomStatus] = None


class RoomResponse(RoomBase):
    id: int
    status: str
    photo: Optional[str] = None
    photo_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoomSummary(BaseModel):
    id: int
    name: str
    faculty_name: str

    model_config = ConfigDict(from_attributes=True)

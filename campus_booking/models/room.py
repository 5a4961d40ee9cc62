from datetime import datetime
from sqlalchemy.orm import relationship
from sqlalchemy import Column, Integer, String, DateTime
from campus_booking.db import Base


ROOM_STATUSES = ("draft", "approved", "rejected")


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), index=True, nullable=False)
    faculty_name = Column(String(255), nullable=False)
    photo = Column(String, nullable=True)
    capacity = Column(Integer, nullable=False)
    status = Column(String(16), nullable=False, default="draft")
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    booking_details = relationship("BookingDetail", back_populates="room", passive_deletes="all")

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from campus_booking.db import get_db
from campus_booking.schemas.dashboard import DashboardResponse
from campus_booking.services.dashboard import collect_stats
from campus_booking.utils.auth import get_current_user

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/", response_model=DashboardResponse)
def get_dashboard(db: Session = Depends(get_db)):
    """
    Totals of users, rooms and bookings, room status counts and the
    bookings/users created over the last seven days.
    """
    return collect_stats(db)

from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from campus_booking.models.booking import Booking
from campus_booking.models.room import Room
from campus_booking.models.user import User

TREND_DAYS = 7


def _count_created_on(db: Session, model, day: date) -> int:
    start = datetime.combine(day, datetime.min.time())
    return db.query(model).filter(
        model.created_at >= start,
        model.created_at < start + timedelta(days=1),
    ).count()


def collect_stats(db: Session, today: Optional[date] = None) -> dict:
    """Totals, room status breakdown and seven-day creation trends."""
    today = today or date.today()

    total_users = db.query(User).count()
    total_rooms = db.query(Room).count()
    total_bookings = db.query(Booking).count()
    approved_rooms = db.query(Room).filter(Room.status == "approved").count()
    draft_rooms = db.query(Room).filter(Room.status == "draft").count()
    rejected_rooms = db.query(Room).filter(Room.status == "rejected").count()

    days = [today - timedelta(days=offset) for offset in range(TREND_DAYS - 1, -1, -1)]
    booking_trends = [
        {"date": day.strftime("%b %d"), "bookings": _count_created_on(db, Booking, day)} for day in days
    ]
    user_trends = [
        {"date": day.strftime("%b %d"), "users": _count_created_on(db, User, day)} for day in days
    ]

    return {
        "stats": {
            "totalUsers": total_users,
            "totalRooms": total_rooms,
            "totalBookings": total_bookings,
            "approvedRooms": approved_rooms,
            "draftRooms": draft_rooms,
            "rejectedRooms": rejected_rooms,
        },
        "charts": {
            "roomStatus": [
                {"name": "Approved", "value": approved_rooms, "fill": "#10b981"},
                {"name": "Draft", "value": draft_rooms, "fill": "#f59e0b"},
                {"name": "Rejected", "value": rejected_rooms, "fill": "#ef4444"},
            ],
            "mainStats": [
                {"name": "Users", "value": total_users, "fill": "#3b82f6"},
                {"name": "Rooms", "value": total_rooms, "fill": "#8b5cf6"},
                {"name": "Bookings", "value": total_bookings, "fill": "#ec4899"},
            ],
            "bookingTrends": booking_trends,
            "userTrends": user_trends,
        },
    }

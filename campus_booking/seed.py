"""Create the admin account and, optionally, demo data for the dashboard.

Usage: python -m campus_booking.seed [--demo]
"""

import argparse
import logging
import random
from datetime import date, datetime, timedelta

from campus_booking.config import ADMIN_EMAIL, ADMIN_PASSWORD, LOG_LEVEL
from campus_booking.db import SessionLocal, commit, init_database
from campus_booking.models.booking import Booking, BookingDetail
from campus_booking.models.room import Room
from campus_booking.models.user import User
from campus_booking.utils.auth import get_password_hash

logger = logging.getLogger(__name__)

WORDS = ["Aurora", "Cedar", "Delta", "Ember", "Falcon", "Granite", "Harbor", "Iris", "Juniper", "Kestrel"]
ROOM_STATUS_COUNTS = {"approved": 5, "draft": 3, "rejected": 2}


def ensure_admin(db, email=ADMIN_EMAIL, password=ADMIN_PASSWORD) -> User:
    admin = db.query(User).filter(User.email == email).first()
    if admin:
        return admin
    admin = User(name="Administrator", email=email, role="admin", hashed_password=get_password_hash(password))
    db.add(admin)
    commit(db)
    logger.info(f"Created admin user: {email}")
    return admin


def seed_demo(db, rng=None, users=15, bookings=20):
    rng = rng or random.Random()
    password = get_password_hash("password")
    people = [
        User(
            name=f"{rng.choice(WORDS)} {index}",
            email=f"demo{index}.{rng.randrange(10**6)}@campus.example.com",
            role=rng.choice(["user", "manager"]),
            hashed_password=password,
        )
        for index in range(users)
    ]
    db.add_all(people)

    rooms = []
    for room_status, count in ROOM_STATUS_COUNTS.items():
        for _ in range(count):
            rooms.append(
                Room(
                    name=f"{rng.choice(WORDS)} Room",
                    faculty_name=f"{rng.choice(WORDS)} Faculty",
                    capacity=rng.randint(5, 100),
                    status=room_status,
                )
            )
    db.add_all(rooms)
    db.flush()

    for _ in range(bookings):
        tgl = date.today() + timedelta(days=rng.randint(0, 14))
        start = datetime.combine(tgl, datetime.min.time()) + timedelta(hours=rng.randint(8, 16))
        booking = Booking(tgl=tgl, customer_name=rng.choice(WORDS), user_id=rng.choice(people).id)
        booking.booking_details.append(
            BookingDetail(room_id=rng.choice(rooms).id, start=start, end=start + timedelta(hours=rng.randint(1, 3)))
        )
        db.add(booking)
    commit(db)
    logger.info(f"Seeded {users} users, {len(rooms)} rooms and {bookings} bookings")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed the campus booking database.")
    parser.add_argument("--demo", action="store_true", help="also create demo users, rooms and bookings")
    args = parser.parse_args(argv)

    logging.basicConfig(level=LOG_LEVEL)
    init_database()
    db = SessionLocal()
    try:
        ensure_admin(db)
        if args.demo:
            seed_demo(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()

import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/campus_booking.db")

# JWT configuration
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-campus-booking-secret")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

# Public disk for room photos
STORAGE_ROOT = os.getenv("STORAGE_ROOT", "./data/storage")
STORAGE_URL = os.getenv("STORAGE_URL", "/storage")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Account created by `python -m campus_booking.seed`
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@campus.example.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "password")

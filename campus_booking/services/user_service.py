import logging
from typing import Optional

from sqlalchemy.orm import Session

from campus_booking.db import commit, rollback
from campus_booking.models.user import User
from campus_booking.schemas.user import UserCreate, UserUpdate
from campus_booking.utils.auth import get_password_hash
from campus_booking.utils.errors import AuthorizationError, ErrorBag, NotFoundError

logger = logging.getLogger(__name__)


def _email_taken(db: Session, email: str, ignore_id: Optional[int] = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if ignore_id is not None:
        query = query.filter(User.id != ignore_id)
    return query.first() is not None


def list_users(db: Session, search: Optional[str] = None, skip: int = 0, limit: int = 10):
    query = db.query(User)
    if search:
        query = query.filter(User.name.like(f"%{search}%"))
    return query.order_by(User.id).offset(skip).limit(limit).all()


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.error(f"User not found: {user_id}")
        raise NotFoundError("User")
    return user


def create_user(db: Session, data: UserCreate) -> User:
    errors = ErrorBag()
    if _email_taken(db, data.email):
        errors.add("email", "The email has already been taken.")
    if data.password != data.password_confirmation:
        errors.add("password", "The password confirmation does not match.")
    errors.raise_if_any()

    user = User(
        name=data.name,
        email=data.email,
        role=data.role,
        hashed_password=get_password_hash(data.password),
    )
    try:
        db.add(user)
        commit(db)
    except Exception:
        rollback(db)
        raise
    db.refresh(user)
    logger.debug(f"Created user: {user.id}, role: {user.role}")
    return user


def update_user(db: Session, user_id: int, data: UserUpdate) -> User:
    user = get_user(db, user_id)

    errors = ErrorBag()
    if _email_taken(db, data.email, ignore_id=user_id):
        errors.add("email", "The email has already been taken.")
    errors.raise_if_any()

    try:
        user.name = data.name
        user.email = data.email
        user.role = data.role
        commit(db)
    except Exception:
        rollback(db)
        raise
    db.refresh(user)
    logger.debug(f"Updated user: {user_id}")
    return user


def delete_user(db: Session, user_id: int, actor_id: int):
    """Delete ``user_id`` on behalf of ``actor_id``; nobody may delete themselves."""
    if user_id == actor_id:
        logger.error(f"User {actor_id} attempted to delete their own account")
        raise AuthorizationError("You cannot delete your own account.")

    user = get_user(db, user_id)
    try:
        db.delete(user)
        commit(db)
    except Exception:
        rollback(db)
        raise
    logger.debug(f"Deleted user: {user_id}")

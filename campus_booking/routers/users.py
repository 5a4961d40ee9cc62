from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from campus_booking.db import get_db
from campus_booking.schemas.user import UserCreate, UserResponse, UserUpdate
from campus_booking.services import user_service
from campus_booking.utils.auth import get_current_user

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/", response_model=List[UserResponse])
def get_users(search: Optional[str] = None, skip: int = 0, limit: int = 10, db: Session = Depends(get_db)):
    """
    List users, optionally filtered by a substring of their name.
    """
    return user_service.list_users(db, search=search, skip=skip, limit=limit)


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, db: Session = Depends(get_db)):
    """
    Create a user with a role of admin, user or manager.
    """
    return user_service.create_user(db, user)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return user_service.get_user(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: int, user: UserUpdate, db: Session = Depends(get_db)):
    """
    Update name, email and role. The password is not changed here.
    """
    return user_service.update_user(db, user_id, user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)):
    """
    Delete a user. The authenticated user cannot delete their own account.
    """
    user_service.delete_user(db, user_id, actor_id=current_user["id"])
    return None

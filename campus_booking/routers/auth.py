import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from campus_booking.db import get_db
from campus_booking.schemas.user import CurrentUser, Token
from campus_booking.services.user_service import get_user
from campus_booking.utils.auth import authenticate_user, create_access_token, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """
    Exchange an email (sent as `username`) and password for a bearer token.
    """
    user = authenticate_user(db, form_data.username, form_data.password)
    if not user:
        logger.error(f"Failed login for: {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    logger.debug(f"Issued token for user: {user.id}")
    return {"access_token": create_access_token({"sub": user.email}), "token_type": "bearer"}


@router.get("/me", response_model=CurrentUser)
def me(db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)):
    user = get_user(db, current_user["id"])
    return {**current_user, "name": user.name}

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from campus_booking.config import LOG_LEVEL, STORAGE_URL
from campus_booking.db import init_database
from campus_booking.routers import auth, bookings, dashboard, rooms, users
from campus_booking.utils.errors import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
    errors_from_pydantic,
)
from campus_booking.utils.storage import photo_disk

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    "lifespan for initing database"
    init_database()
    yield


app = FastAPI(
    lifespan=lifespan,
    title="Campus room booking",
    description="Room, user and booking administration for campus facilities.",
    version="0.1.0",
)


def _invalid(errors: dict, message: str = "The given data was invalid.") -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": message, "errors": errors},
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _invalid(exc.errors, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    logger.error(f"Rejected request to {request.url.path}: {exc.errors()}")
    return _invalid(errors_from_pydantic(exc.errors()))


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


@app.exception_handler(AuthorizationError)
async def authorization_error_handler(request: Request, exc: AuthorizationError):
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": exc.message})


app.include_router(auth.router)
app.include_router(rooms.router)
app.include_router(users.router)
app.include_router(bookings.router)
app.include_router(dashboard.router)

app.mount(STORAGE_URL, StaticFiles(directory=photo_disk.root, check_dir=False), name="storage")

import os
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from campus_booking.config import DATABASE_URL


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(DATABASE_URL, connect_args=_connect_args(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_database():
    # make sure every model is registered on Base.metadata
    from campus_booking.models import booking, room, user  # noqa: F401

    if DATABASE_URL.startswith("sqlite:///./"):
        directory = os.path.dirname(DATABASE_URL[len("sqlite:///"):])
        if directory and not os.path.exists(directory):
            os.makedirs(directory)
    Base.metadata.create_all(bind=engine)


def get_db():
    """Provide a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def after_commit(db, callback):
    """Queue ``callback`` to run after the next successful ``commit(db)``."""
    db.info.setdefault("after_commit", []).append(callback)


def commit(db):
    """Commit the session, then run the callbacks queued by ``after_commit``."""
    db.commit()
    for callback in db.info.pop("after_commit", []):
        callback()


def rollback(db):
    """Roll back the session and drop any queued post-commit callbacks."""
    db.rollback()
    db.info.pop("after_commit", None)

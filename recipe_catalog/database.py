# recipe_catalog/database.py
import logging
import time

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from recipe_catalog.config import DATABASE_URL, DB_CONNECT_RETRIES, DB_CONNECT_RETRY_DELAY
from recipe_catalog.models import Base

logger = logging.getLogger(__name__)

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, future=True, connect_args=_connect_args)


def set_sqlite_pragmas(dbapi_conn, _):
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys=ON;")
    cur.execute("PRAGMA synchronous=NORMAL;")
    cur.execute("PRAGMA temp_store=MEMORY;")
    cur.close()


if engine.dialect.name == "sqlite":
    event.listen(engine, "connect", set_sqlite_pragmas)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def connect_with_retry(bind=None, retries: int = DB_CONNECT_RETRIES, delay: float = DB_CONNECT_RETRY_DELAY) -> None:
    """
    Ping the database until it answers, giving up after `retries` attempts.
    Only connection-level (operational) failures are retried.
    """
    bind = bind if bind is not None else engine
    attempt = 0
    while True:
        attempt += 1
        try:
            with bind.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection established (attempt %d)", attempt)
            return
        except OperationalError as e:
            if attempt >= retries:
                logger.error("Failed to connect to database after %d attempts: %s", attempt, e)
                raise
            logger.warning("Database connection attempt %d/%d failed, retrying: %s", attempt, retries, e)
            time.sleep(delay)


def init_db(bind=None) -> None:
    bind = bind if bind is not None else engine
    connect_with_retry(bind)
    Base.metadata.create_all(bind=bind)


def close_db(bind=None) -> None:
    bind = bind if bind is not None else engine
    try:
        bind.dispose()
        logger.info("Database connection closed")
    except Exception:
        logger.exception("Error closing database connection")

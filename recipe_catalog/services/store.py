# recipe_catalog/services/store.py
import logging
from typing import Type, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from recipe_catalog.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

M = TypeVar("M")


def get_or_404(db: Session, model: Type[M], id: str, label: str) -> M:
    row = db.get(model, id)
    if row is None:
        logger.warning("%s with ID '%s' not found", label, id)
        raise NotFoundError(f"{label} with ID '{id}' not found")
    return row


def _write(db: Session, op, conflict_message: str, id: str | None) -> None:
    try:
        op()
    except IntegrityError as e:
        db.rollback()
        logger.warning("%s (%s)", conflict_message, e.orig)
        raise ConflictError(conflict_message) from e
    except StaleDataError as e:
        db.rollback()
        logger.warning("Item with ID '%s' disappeared during write", id)
        raise NotFoundError(f"Item with ID '{id}' not found") from e


def commit(db: Session, conflict_message: str, id: str | None = None) -> None:
    """
    Commit the unit of work, turning unique-index violations into ConflictError
    and rows deleted underneath us into NotFoundError.
    """
    _write(db, db.commit, conflict_message, id)


def flush(db: Session, conflict_message: str, id: str | None = None) -> None:
    """Same translation as commit(), for writes pushed out mid-transaction."""
    _write(db, db.flush, conflict_message, id)

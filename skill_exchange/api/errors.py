# skill_exchange/api/errors.py
"""Translate service-layer failures into HTTP responses."""

import logging
from contextlib import contextmanager

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skill_exchange.exceptions import ExchangeError

logger = logging.getLogger(__name__)


@contextmanager
def service_errors(db: Session, action: str):
    """
    Run a service call inside a router.

    Domain errors become their HTTP status with ``{"detail": message}``.
    Database errors roll back the unit of work and become a 500.
    """
    try:
        yield
    except ExchangeError as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Database error while %s", action)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import storage
from services.exceptions import AlreadyExists, BadRequest, Internal, NotFound

logger = logging.getLogger(__name__)


def parse_uuid(value, label: str) -> str:
    """Canonical UUID string or BadRequest("invalid <label> ID")."""
    try:
        return str(uuid.UUID(str(value)))
    except (ValueError, TypeError, AttributeError):
        raise BadRequest(f"invalid {label} ID")


def to_naive_utc(value: datetime) -> datetime:
    """Aware datetimes are converted to UTC; naive ones are taken as UTC already."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class BaseService:
    """Shared plumbing: session access, lookups, commit with error mapping."""

    @property
    def session(self):
        return storage.get_session()

    def _get_or_404(self, cls, obj_id: str, label: str):
        obj = storage.get(cls, obj_id)
        if obj is None:
            raise NotFound(f"{label} not found")
        return obj

    def _flush(self, action: str, duplicate_message: str | None = None) -> None:
        """Flush pending writes inside the open transaction, mapping errors like _commit."""
        try:
            storage.flush()
        except SQLAlchemyError as exc:
            storage.rollback()
            self._raise_mapped(exc, action, duplicate_message)

    def _commit(self, action: str, duplicate_message: str | None = None) -> None:
        """
        Commit the unit of work. storage.save() already rolled back on failure;
        here the driver error becomes a taxonomy member.
        """
        try:
            storage.save()
        except SQLAlchemyError as exc:
            self._raise_mapped(exc, action, duplicate_message)

    @staticmethod
    def _raise_mapped(exc: SQLAlchemyError, action: str, duplicate_message: str | None):
        if isinstance(exc, IntegrityError):
            message = str(getattr(exc, "orig", exc))
            logger.warning("integrity error while trying to %s: %s", action, message)
            lowered = message.lower()
            if "unique" in lowered or "duplicate" in lowered:
                raise AlreadyExists(duplicate_message or f"failed to {action}: duplicate entry") from exc
            raise BadRequest(f"failed to {action}: constraint violated") from exc
        logger.error("failed to %s", action, exc_info=exc)
        raise Internal(f"failed to {action}") from exc

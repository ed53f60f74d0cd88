#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the Waste Space API.

- UUID primary key (String(36)) with defaults
- created_at / updated_at timestamps
- SoftDeleteMixin: deleted_at column plus helpers; soft-deleted rows stay in
  the table but every read path filters them out.

Notes:
- Timestamps get a Python-side default as well as a server default so rows
  created within the same second still order correctly on SQLite.
- SoftDelete: put the mixin FIRST in the model inheritance list.
  Example:
    class Dumpster(SoftDeleteMixin, BaseModel, Base): ...
"""

from __future__ import annotations

from datetime import datetime
import uuid

# Importing 'models' gives access to the global 'storage' instance (DBStorage)
# defined in models/__init__.py.
import models

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

# Declarative base for all models
Base = declarative_base()


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC now; every timestamp in the store is naive UTC."""
    return datetime.utcnow()


class BaseModel:
    """
    Base mixin for all persistent models: id, created_at, updated_at.
    """

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    created_at = Column(DateTime, default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        # Ensure an id exists if caller passed none
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()

    def __str__(self) -> str:
        """Human-friendly representation including id and fields."""
        return f"[{self.__class__.__name__}] ({self.id}) {self.__dict__}"


class SoftDeleteMixin:
    """
    Adds a deleted_at timestamp plus soft_delete/restore helpers.
    Place this mixin BEFORE BaseModel in the class base list.
    """

    deleted_at = Column(DateTime, nullable=True, index=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def restore(self):
        """Clear deleted_at; the caller commits."""
        self.deleted_at = None
        models.storage.new(self)

    def soft_delete(self):
        """Set deleted_at; the caller commits."""
        self.deleted_at = utcnow()
        models.storage.new(self)

    @classmethod
    def alive(cls):
        """Filter expression selecting rows that are not soft-deleted."""
        return cls.deleted_at.is_(None)

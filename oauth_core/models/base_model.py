#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the OAuth2 token store.

- UUID primary key (String(36)) with defaults
- inserted_at timestamp, set in Python so rows created within the same
  second still order correctly
- RevocableMixin: revoked_at plus the expiry/accessibility predicates shared
  by access tokens and access grants

Timestamps are naive UTC datetimes.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import uuid

from sqlalchemy import Column, String, DateTime, Integer
from sqlalchemy.orm import declarative_base

# Declarative base for all models
Base = declarative_base()


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseModel:
    """
    Base mixin for all persistent models.

    Rows are created once; inserted_at is the authoritative creation time and
    is what expiry is computed from.
    """

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    inserted_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        If you pass inserted_at explicitly (e.g., in tests), it will be kept.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()
        if getattr(self, "inserted_at", None) is None:
            self.inserted_at = utcnow()


class RevocableMixin:
    """
    Adds revoked_at and expires_in to a model.

    Revocation is permanent: revoked_at is set once and never cleared or
    overwritten. Expiry is a read-time predicate; nothing is deleted.
    """

    expires_in = Column(Integer, nullable=True)  # seconds; NULL never expires
    revoked_at = Column(DateTime, nullable=True)

    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    def expires_at(self) -> datetime | None:
        if self.expires_in is None:
            return None
        return self.inserted_at + timedelta(seconds=self.expires_in)

    def is_expired(self, now: datetime | None = None) -> bool:
        expires_at = self.expires_at()
        if expires_at is None:
            return False
        return (now or utcnow()) >= expires_at

    def is_accessible(self, now: datetime | None = None) -> bool:
        return not self.is_revoked() and not self.is_expired(now)

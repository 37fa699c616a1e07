"""
Base class and AuditMixin for all SQLAlchemy ORM models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class AuditMixin:
    """
    Mixin providing the identifier, soft delete flag and actor tracking
    shared by every entity.

    Fields added:
    - id: Integer primary key
    - is_active: Business "enabled" flag, independent from deletion
    - is_deleted: Soft delete flag (True = logically removed)
    - created_at, updated_at: Audit timestamps
    - added_by, updated_by: Actor (user) ids

    The actor columns hold plain ids, not foreign keys: the `user` table
    itself carries them, and the cascade engine resolves these references
    through the relationship registry instead of database constraints.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    added_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    updated_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        state = "deleted" if self.is_deleted else "live"
        return f"<{class_name}(id={self.id}, {state})>"

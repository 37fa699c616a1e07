"""
Clinical models: enterprises and their departments, encounters, notes,
medications and patients.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import AuditMixin, Base


class Enterprise(AuditMixin, Base):
    """Healthcare organisation owning departments and notes."""

    __tablename__ = "enterprise"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[Optional[str]] = mapped_column(String(50))
    type: Mapped[Optional[str]] = mapped_column(String(100))


class Departments(AuditMixin, Base):
    __tablename__ = "departments"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[Optional[str]] = mapped_column(String(50))
    email: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    # Owning enterprise
    enterprises: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("enterprise.id"), nullable=True, index=True
    )


class Encounter(AuditMixin, Base):
    __tablename__ = "encounter"

    status: Mapped[Optional[str]] = mapped_column(String(50))
    encounter_class: Mapped[Optional[str]] = mapped_column(String(50))
    reason: Mapped[Optional[str]] = mapped_column(Text)
    period_start: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    period_end: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class Note(AuditMixin, Base):
    """
    Clinical note.

    `encounter_id` stores an enterprise id: notes are filed against the
    enterprise record, and deleting an enterprise removes its notes.
    `provider` is the authoring user.
    """

    __tablename__ = "note"

    title: Mapped[Optional[str]] = mapped_column(String(200))
    content: Mapped[Optional[str]] = mapped_column(Text)
    provider: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    encounter_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("enterprise.id"), nullable=True, index=True
    )


class Medication(AuditMixin, Base):
    __tablename__ = "medication"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[Optional[str]] = mapped_column(String(50))
    dosage_form: Mapped[Optional[str]] = mapped_column(String(100))
    strength: Mapped[Optional[str]] = mapped_column(String(100))


class Patient(AuditMixin, Base):
    __tablename__ = "patient"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[Optional[str]] = mapped_column(String(100))
    gender: Mapped[Optional[str]] = mapped_column(String(20))
    birth_date: Mapped[Optional[date]] = mapped_column(Date)
    phone: Mapped[Optional[str]] = mapped_column(String(50))

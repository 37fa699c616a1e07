"""
Appointment slots and the schedules booked into them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import AuditMixin, Base


class AppointmentSlot(AuditMixin, Base):
    __tablename__ = "appointment_slot"

    # Slot owner
    user_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    start_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    slot_length: Mapped[Optional[int]] = mapped_column(Integer)  # minutes


class AppointmentSchedule(AuditMixin, Base):
    __tablename__ = "appointment_schedule"

    slot: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("appointment_slot.id"), nullable=True, index=True
    )
    # Hosting user
    host: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    participant: Mapped[Optional[str]] = mapped_column(String(200))
    start_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    status: Mapped[Optional[str]] = mapped_column(String(50))

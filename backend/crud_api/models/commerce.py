"""
Orders, order items, customers and subscription plans.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import AuditMixin, Base


class Order(AuditMixin, Base):
    __tablename__ = "order"

    # Ordering user
    order_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    order_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    status: Mapped[Optional[str]] = mapped_column(String(50))
    total: Mapped[Optional[float]] = mapped_column(Float)


class OrderItem(AuditMixin, Base):
    __tablename__ = "order_item"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    unit_price: Mapped[Optional[float]] = mapped_column(Float)


class Customer(AuditMixin, Base):
    __tablename__ = "customer"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    address: Mapped[Optional[str]] = mapped_column(Text)


class Plan(AuditMixin, Base):
    __tablename__ = "plan"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[Optional[float]] = mapped_column(Float)
    duration_days: Mapped[Optional[int]] = mapped_column(Integer)

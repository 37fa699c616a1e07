"""
User, authentication bookkeeping and role/route permission models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import AuditMixin, Base


class User(AuditMixin, Base):
    """Application user. Every other entity points here through added_by/updated_by."""

    __tablename__ = "app_user"

    username: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    name: Mapped[Optional[str]] = mapped_column(String(200))
    user_type: Mapped[int] = mapped_column(Integer, default=1)


class UserAuthSettings(AuditMixin, Base):
    """Per-user login settings (OTP, retry limits, reset codes)."""

    __tablename__ = "user_auth_settings"

    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("app_user.id"), nullable=False, index=True)
    login_otp: Mapped[Optional[str]] = mapped_column(String(20))
    login_retry_limit: Mapped[int] = mapped_column(Integer, default=0)
    login_reactive_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    reset_password_code: Mapped[Optional[str]] = mapped_column(String(100))


class UserToken(AuditMixin, Base):
    """Issued tokens kept for revocation."""

    __tablename__ = "user_token"

    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("app_user.id"), nullable=False, index=True)
    token: Mapped[str] = mapped_column(Text, nullable=False)
    token_expired_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    is_token_expired: Mapped[bool] = mapped_column(Boolean, default=False)


class Role(AuditMixin, Base):
    __tablename__ = "role"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    weight: Mapped[int] = mapped_column(Integer, default=1)


class ProjectRoute(AuditMixin, Base):
    __tablename__ = "project_route"

    route_name: Mapped[str] = mapped_column(String(200), nullable=False)
    method: Mapped[str] = mapped_column(String(10), nullable=False)
    uri: Mapped[str] = mapped_column(String(500), nullable=False)


class RouteRole(AuditMixin, Base):
    """Which role may call which route."""

    __tablename__ = "route_role"

    route_id: Mapped[int] = mapped_column(Integer, ForeignKey("project_route.id"), nullable=False, index=True)
    role_id: Mapped[int] = mapped_column(Integer, ForeignKey("role.id"), nullable=False, index=True)


class UserRole(AuditMixin, Base):
    __tablename__ = "user_role"

    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("app_user.id"), nullable=False, index=True)
    role_id: Mapped[int] = mapped_column(Integer, ForeignKey("role.id"), nullable=False, index=True)

"""
Collaboration models: tasks, to-dos, chat, threaded comments, blog posts,
events and the hierarchical master-data table.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import AuditMixin, Base


class Task(AuditMixin, Base):
    __tablename__ = "task"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    # User who closed the task
    completed_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class ToDo(AuditMixin, Base):
    __tablename__ = "todo"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class ChatGroup(AuditMixin, Base):
    __tablename__ = "chat_group"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[Optional[str]] = mapped_column(String(50))


class ChatMessage(AuditMixin, Base):
    __tablename__ = "chat_message"

    group_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("chat_group.id"), nullable=True, index=True
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    sender: Mapped[Optional[str]] = mapped_column(String(100))


class Comment(AuditMixin, Base):
    """Threaded comment; replies point at their parent through parent_item."""

    __tablename__ = "comment"

    comment: Mapped[str] = mapped_column(Text, nullable=False)
    parent_item: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("comment.id"), nullable=True, index=True
    )
    upvotes: Mapped[int] = mapped_column(Integer, default=0)
    downvotes: Mapped[int] = mapped_column(Integer, default=0)
    comment_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class Blog(AuditMixin, Base):
    __tablename__ = "blog"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    alternative_headline: Mapped[Optional[str]] = mapped_column(String(200))
    image: Mapped[Optional[str]] = mapped_column(String(2048))
    publish_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    author_name: Mapped[Optional[str]] = mapped_column(String(200))
    body: Mapped[Optional[str]] = mapped_column(Text)


class Event(AuditMixin, Base):
    __tablename__ = "event"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    address: Mapped[Optional[str]] = mapped_column(Text)
    start_date_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    end_date_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class Master(AuditMixin, Base):
    """Hierarchical lookup values; children reference their parent through parent_id."""

    __tablename__ = "master"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[Optional[str]] = mapped_column(String(200))
    code: Mapped[Optional[str]] = mapped_column(String(50))
    group: Mapped[Optional[str]] = mapped_column(String(100))
    description: Mapped[Optional[str]] = mapped_column(Text)
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("master.id"), nullable=True, index=True
    )
    sequence: Mapped[Optional[int]] = mapped_column(Integer)

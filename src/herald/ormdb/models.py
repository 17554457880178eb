"""SQLAlchemy ORM models for the Herald application."""

import datetime

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.types import JSON

from .database import Base


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC).replace(tzinfo=None)


DEFAULT_USER_CHANNELS = {"email": True, "sms": False, "push": False}
DEFAULT_DELIVERY_STATS = {"total": 0, "sent": 0, "failed": 0, "pending": 0}


class User(Base):
    """A person who can receive and acknowledge alerts."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False)
    role = Column(String, default="subscriber", nullable=False, index=True)
    channels = Column(JSON, default=lambda: dict(DEFAULT_USER_CHANNELS), nullable=False)
    phone_number = Column(String, nullable=True)
    push_token = Column(String, nullable=True)
    push_token_kind = Column(String, nullable=True)  # 'expo' or 'other'
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"


class Alert(Base):
    """An alert and its delivery outcome."""

    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    message = Column(Text, nullable=False)
    severity = Column(String, default="medium", nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    channels = Column(JSON, default=lambda: ["email"], nullable=False)
    targeting = Column(
        JSON, default=lambda: {"all": False, "roles": [], "specific": []}, nullable=False
    )
    status = Column(String, default="pending", nullable=False, index=True)
    delivery_stats = Column(
        JSON, default=lambda: dict(DEFAULT_DELIVERY_STATS), nullable=False
    )
    # Set once by the single dispatch allowed per alert
    dispatch_started_at = Column(DateTime, nullable=True)
    sent_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    creator = relationship("User")
    acknowledgments = relationship(
        "AlertAcknowledgment",
        back_populates="alert",
        cascade="all, delete-orphan",
        order_by="AlertAcknowledgment.acknowledged_at",
    )

    def __repr__(self):
        return f"<Alert(id={self.id}, title='{self.title}', status='{self.status}')>"


class AlertAcknowledgment(Base):
    """A user's acknowledgment of an alert; at most one per (alert, user)."""

    __tablename__ = "alert_acknowledgments"
    __table_args__ = (
        UniqueConstraint("alert_id", "user_id", name="uq_alert_acknowledgments_alert_user"),
    )

    id = Column(Integer, primary_key=True, index=True)
    alert_id = Column(
        Integer, ForeignKey("alerts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    acknowledged_at = Column(DateTime, default=_utcnow, nullable=False)
    notes = Column(Text, nullable=True)

    alert = relationship("Alert", back_populates="acknowledgments")

    def __repr__(self):
        return f"<AlertAcknowledgment(alert_id={self.alert_id}, user_id={self.user_id})>"

"""SQLAlchemy models for notifications and their delivery records."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression

from campus_notify.infrastructure.database import Base
from campus_notify.utils import now_utc, to_naive_utc


def _naive_now():
    return to_naive_utc(now_utc())


class NotificationModel(Base):
    """Notification content together with its targeting specification."""

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(50), nullable=False, index=True)
    priority = Column(String(20), nullable=False, default="normal")

    target_all_users = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    target_branches = Column(JSON, nullable=False, default=list)
    target_semesters = Column(JSON, nullable=False, default=list)
    target_years = Column(JSON, nullable=False, default=list)
    target_users = Column(JSON, nullable=False, default=list)

    scheduled_for = Column(DateTime, nullable=False, default=_naive_now, index=True)
    expires_at = Column(DateTime, nullable=True, index=True)

    related_resource_type = Column(String(50), nullable=True)
    related_resource_id = Column(String(64), nullable=True)
    extra = Column("metadata", JSON, nullable=False, default=dict)
    dedup_key = Column(String(120), nullable=True, unique=True)

    created_by = Column(
        Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime, nullable=False, default=_naive_now)
    delivered_at = Column(DateTime, nullable=True)
    # Audience resolved once at creation; fan-out and its resumptions only use this.
    recipients = Column(JSON, nullable=False, default=list)

    deliveries = relationship(
        "DeliveryModel",
        back_populates="notification",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class DeliveryModel(Base):
    """Per-recipient delivery row tracking read and dismiss state."""

    __tablename__ = "user_notification"
    __table_args__ = (
        UniqueConstraint(
            "notification_id", "user_id", name="uq_user_notification_recipient"
        ),
        Index("ix_user_notification_user_read", "user_id", "is_read"),
    )

    id = Column(Integer, primary_key=True, index=True)
    notification_id = Column(
        Integer,
        ForeignKey("notification.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    is_read = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    read_at = Column(DateTime, nullable=True)
    is_dismissed = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    dismissed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=_naive_now)

    notification = relationship("NotificationModel", back_populates="deliveries")


__all__ = ["NotificationModel", "DeliveryModel"]

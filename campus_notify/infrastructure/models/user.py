"""SQLAlchemy model for the campus user directory."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func
from sqlalchemy.sql import expression

from campus_notify.infrastructure.database import Base


class UserModel(Base):
    """Directory row owned by the account management layer."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    branch_id = Column(String(36), nullable=True, index=True)
    semester = Column(Integer, nullable=True, index=True)
    year = Column(Integer, nullable=True, index=True)
    is_admin = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    is_active = Column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )
    created_at = Column(DateTime, nullable=False, server_default=func.now())

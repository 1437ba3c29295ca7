"""
SQLAlchemy ORM models for users and their optional one-to-one records.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    user_name = Column(String(100), unique=True, nullable=False)
    account = Column(String(100), unique=True, nullable=False)
    email = Column(String(100), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_email_verified = Column(Boolean, nullable=False, default=False)

    introduction = relationship(
        "UserIntroduction", back_populates="user", uselist=False, cascade="all, delete-orphan",
    )
    rights = relationship(
        "UserRights", back_populates="user", uselist=False, cascade="all, delete-orphan",
    )
    wallet = relationship(
        "UserWallet", back_populates="user", uselist=False, cascade="all, delete-orphan",
    )


class UserIntroduction(Base):
    __tablename__ = "user_introductions"

    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    nickname = Column(String(100))
    gender = Column(String(20))
    id_number = Column(String(32))
    cellphone = Column(String(32))
    email = Column(String(100))
    address = Column(String(200))
    date_of_birth = Column(Date, nullable=True)
    bio = Column(Text)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="introduction")


class UserRights(Base):
    __tablename__ = "user_rights"

    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    user_status = Column(Boolean, nullable=False, default=False)
    shopping_permission = Column(Boolean, nullable=False, default=False)
    message_permission = Column(Boolean, nullable=False, default=False)
    sales_authority = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)

    user = relationship("User", back_populates="rights")


class UserWallet(Base):
    __tablename__ = "user_wallets"

    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    points = Column(Integer, nullable=False, default=0)
    coupon_number = Column(String(50), nullable=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)

    user = relationship("User", back_populates="wallet")

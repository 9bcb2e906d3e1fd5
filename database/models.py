"""
SQLAlchemy ORM models mirroring the Alembic revisions in database/migrations.
"""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Index, Integer, Text, func
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        Index("uq_users_username", "username", unique=True),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, nullable=False)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.current_timestamp())

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"

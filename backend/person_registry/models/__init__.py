"""
Person Registry Database Models

SQLAlchemy models for the durable person store.
"""

from sqlalchemy import UUID, Date, Integer, Text, CheckConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from typing import Optional
import datetime
import uuid


class Base(DeclarativeBase):
    """Canonical Base class for all database models."""

    pass


class PersonModel(Base):
    """Authoritative person row."""

    __tablename__ = "person"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    birth_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    death_date: Mapped[Optional[datetime.date]] = mapped_column(Date, nullable=True)
    data: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    revision: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    __table_args__ = (
        CheckConstraint("revision >= 0", name="check_person_revision_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<PersonModel(id={self.id}, name={self.name}, revision={self.revision})>"

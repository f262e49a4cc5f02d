"""SQLAlchemy models for all database tables."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.enums import ElementSource, ElementStatus, ScriptFormat, ScriptStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Department(Base):
    """Production department an element can be assigned to."""

    __tablename__ = "departments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    production_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )


class Script(Base):
    """An uploaded screenplay version."""

    __tablename__ = "scripts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    production_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    parent_script_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("scripts.id"), nullable=True
    )
    title: Mapped[str | None] = mapped_column(String, nullable=True)
    file_name: Mapped[str | None] = mapped_column(String, nullable=True)
    storage_key: Mapped[str] = mapped_column(String, nullable=False)
    source_storage_key: Mapped[str | None] = mapped_column(
        String, nullable=True, comment="Original upload when the viewer copy differs (FDX)"
    )
    format: Mapped[str] = mapped_column(String(10), nullable=False, default=ScriptFormat.PDF.value)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    scene_data: Mapped[list | None] = mapped_column(JSON, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ScriptStatus.PROCESSING.value
    )  # UPLOADING | PROCESSING | REVIEWING | RECONCILING | READY | ERROR
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    # Relationships
    elements: Mapped[list["Element"]] = relationship(
        "Element", back_populates="script", lazy="raise"
    )
    revision_matches: Mapped[list["RevisionMatch"]] = relationship(
        "RevisionMatch", back_populates="new_script", cascade="all, delete-orphan", lazy="raise"
    )


class Element(Base):
    """A character, location or prop belonging to a script version."""

    __tablename__ = "elements"
    __table_args__ = (
        Index("ix_elements_script_id_status", "script_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    script_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("scripts.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)  # CHARACTER | LOCATION | OTHER
    highlight_page: Mapped[int | None] = mapped_column(Integer, nullable=True)
    highlight_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    department_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("departments.id"), nullable=True
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ElementStatus.ACTIVE.value
    )
    source: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ElementSource.AUTO.value
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    # Relationships
    script: Mapped["Script"] = relationship("Script", back_populates="elements", lazy="raise")


class RevisionMatch(Base):
    """A FUZZY or MISSING correspondence awaiting a human decision."""

    __tablename__ = "revision_matches"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    new_script_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("scripts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    detected_name: Mapped[str] = mapped_column(String, nullable=False)
    detected_type: Mapped[str] = mapped_column(String(20), nullable=False)
    detected_page: Mapped[int | None] = mapped_column(Integer, nullable=True)
    detected_highlight_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    match_status: Mapped[str] = mapped_column(String(20), nullable=False)  # FUZZY | MISSING
    old_element_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("elements.id"), nullable=True
    )
    similarity: Mapped[float | None] = mapped_column(Float, nullable=True)
    user_decision: Mapped[str | None] = mapped_column(
        String(20), nullable=True
    )  # MAP | CREATE_NEW | KEEP | ARCHIVE
    resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    new_script: Mapped["Script"] = relationship(
        "Script", back_populates="revision_matches", lazy="raise"
    )

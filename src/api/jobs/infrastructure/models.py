"""SQLAlchemy ORM model for the jobs table."""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base


class JobModel(Base):
    """ORM model for jobs table.

    Per-item results are stored as JSON lists of
    {"item_id", "description", "error_message"} objects.
    """

    __tablename__ = "jobs"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    user_id: Mapped[str] = mapped_column(String(50), nullable=False)
    username: Mapped[str] = mapped_column(String(50), nullable=False)
    total_items: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    processed_items: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    successful_results: Mapped[list[dict[str, Any]]] = mapped_column(
        nullable=False, default=list
    )
    failed_results: Mapped[list[dict[str, Any]]] = mapped_column(
        nullable=False, default=list
    )

    __table_args__ = (
        Index("idx_jobs_user_status_created", "user_id", "status", "created_at"),
        Index("idx_jobs_status_created", "status", "created_at"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<JobModel(id={self.id}, type={self.type}, status={self.status})>"

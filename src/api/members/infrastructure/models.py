"""SQLAlchemy ORM model for the members table."""

from datetime import datetime

from sqlalchemy import DateTime, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base


class MemberModel(Base):
    """ORM model for members table.

    Emails are stored normalized and are unique; the constraint is the
    last line of defence when two registrations race past the pre-check.
    Audit stamps are set by the application, not by database defaults.
    """

    __tablename__ = "members"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(25), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(10), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    created_by: Mapped[str] = mapped_column(String(50), nullable=False)
    updated_by: Mapped[str] = mapped_column(String(50), nullable=False)

    __table_args__ = (
        UniqueConstraint("email", name="uq_members_email"),
        Index("idx_members_name", "name"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<MemberModel(id={self.id}, name={self.name})>"

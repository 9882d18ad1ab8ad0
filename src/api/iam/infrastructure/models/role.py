"""SQLAlchemy ORM model for the roles table."""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class RoleModel(Base, TimestampMixin):
    """ORM model for roles table.

    Permissions are stored as a JSON list of raw tokens, unknown tokens
    included, so that they round-trip unchanged.
    """

    __tablename__ = "roles"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    permissions: Mapped[list[str]] = mapped_column(nullable=False, default=list)

    __table_args__ = (UniqueConstraint("name", name="uq_roles_name"),)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<RoleModel(id={self.id}, name={self.name})>"

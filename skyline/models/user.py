"""
User model.
Maps to the users table.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from skyline.database import Base


class Role(str, enum.Enum):
    """Caller role. Exactly one per user."""

    ADMIN = "admin"
    USER = "user"


def new_id() -> str:
    """Generate an opaque string identifier."""
    return str(uuid.uuid4())


class User(Base):
    """User model - registered visitors and administrators."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'user')", name="users_role_check"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)  # salt:hash
    role: Mapped[str] = mapped_column(String(20), default=Role.USER.value, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    @property
    def is_admin(self) -> bool:
        """Check if user has admin role."""
        return self.role == Role.ADMIN.value

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"

"""
Vacation and VacationLike models.
Maps to the vacations and vacation_likes tables.
"""

from datetime import date, datetime
from typing import List

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from skyline.database import Base
from skyline.models.user import new_id


class Vacation(Base):
    """Vacation model - a bookable trip listed in the catalogue."""

    __tablename__ = "vacations"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="vacations_dates_check"),
        CheckConstraint("price >= 0 AND price <= 10000", name="vacations_price_check"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    destination: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    image_url: Mapped[str] = mapped_column(String(500), nullable=False)
    image_public_id: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    # The liking set. Only like/unlike write to it.
    likes: Mapped[List["VacationLike"]] = relationship(
        "VacationLike",
        back_populates="vacation",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def liked_user_ids(self) -> set[str]:
        return {like.user_id for like in self.likes}

    @property
    def likes_count(self) -> int:
        return len(self.liked_user_ids)

    def is_liked_by(self, user_id: str | None) -> bool:
        return user_id is not None and user_id in self.liked_user_ids

    def __repr__(self) -> str:
        return f"<Vacation {self.destination} ({self.start_date} to {self.end_date})>"


class VacationLike(Base):
    """One member of a vacation's liking set."""

    __tablename__ = "vacation_likes"

    vacation_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("vacations.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    vacation: Mapped["Vacation"] = relationship("Vacation", back_populates="likes")

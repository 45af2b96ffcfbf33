"""
AchievementRecord: an unlocked achievement.

One row per (user_id, code); the unique constraint is the final idempotency
guard for the achievement engine. Display fields are copied from the
definition at unlock time and never mutated.
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from circohback.db.base import Base


class AchievementRecord(Base):
    __tablename__ = "achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "code", name="uq_achievement_user_code"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    code: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(64), nullable=True)
    color: Mapped[str | None] = mapped_column(String(16), nullable=True)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    date_unlocked: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

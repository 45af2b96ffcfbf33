"""
Level-up detection state.

LevelState      : last level observed per user (the Stable(N) state).
LevelUpEvent    : append-only log of LevelUp(N -> M) transitions, consumed
                  once by the celebratory UI via `acknowledged`.
"""
from datetime import datetime
from sqlalchemy import Boolean, Integer, String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from circohback.db.base import Base


class LevelState(Base):
    __tablename__ = "level_states"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    last_level: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class LevelUpEvent(Base):
    __tablename__ = "level_up_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    from_level: Mapped[int] = mapped_column(Integer, nullable=False)
    to_level: Mapped[int] = mapped_column(Integer, nullable=False)
    level_title: Mapped[str] = mapped_column(String(128), nullable=False)
    total_score: Mapped[int] = mapped_column(Integer, nullable=False)
    acknowledged: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

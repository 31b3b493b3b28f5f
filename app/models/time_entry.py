"""SQLAlchemy model for a single block of hours logged by a user."""

from __future__ import annotations

from sqlalchemy import Column, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from ..db.session import Base


class TimeEntry(Base):
    __tablename__ = "time_entries"
    __allow_unmapped__ = True

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    hours = Column(Float, nullable=False)
    # Calendar key in YYYY-MM-DD form; never converted between timezones.
    date = Column(Text, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    created_at = Column(Text, nullable=False)

    project = relationship("Project", back_populates="time_entries")
    user = relationship("User", back_populates="time_entries")


__all__ = ["TimeEntry"]

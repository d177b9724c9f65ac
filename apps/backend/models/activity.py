"""Engagement Index activities and per-course point overrides."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, JSON, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from apps.backend.database import Base


class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(64), nullable=False, index=True)
    object_id = Column(Integer, nullable=True)
    object_type = Column(String(32), nullable=True)  # asset|comment|whiteboard|canvas_submission|...
    metadata_json = Column("metadata", JSON, nullable=True)
    asset_id = Column(Integer, ForeignKey("assets.id", ondelete="SET NULL"), nullable=True, index=True)
    # user_id earns the points; actor_id performed the action when it was someone else.
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    actor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    asset = relationship("Asset")

    __table_args__ = (
        Index("ix_activities_course_time", "course_id", "created_at"),
    )


class ActivityTypeOverride(Base):
    __tablename__ = "activity_type_overrides"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(64), nullable=False)
    points = Column(Integer, nullable=True)
    enabled = Column(Boolean, nullable=True)

    __table_args__ = (
        UniqueConstraint("course_id", "type", name="uq_activity_type_overrides_course_type"),
    )

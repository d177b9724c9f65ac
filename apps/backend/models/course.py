"""Course model."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime

from apps.backend.database import Base


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    canvas_course_id = Column(Integer, nullable=False, index=True)
    canvas_api_domain = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    # Tool URLs are set on first LTI launch of each tool.
    assetlibrary_url = Column(String(255), nullable=True)
    engagementindex_url = Column(String(255), nullable=True)
    whiteboards_url = Column(String(255), nullable=True)
    enable_daily_notifications = Column(Boolean, nullable=False, default=True)
    enable_weekly_notifications = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @property
    def asset_library_enabled(self) -> bool:
        return bool(self.assetlibrary_url)

    @property
    def engagement_index_enabled(self) -> bool:
        return bool(self.engagementindex_url)

"""Course user model."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from apps.backend.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    canvas_user_id = Column(Integer, nullable=False)
    canvas_course_role = Column(String(255), nullable=True)
    canvas_enrollment_state = Column(String(16), nullable=False, default="active")  # active|completed|inactive|invited
    canvas_full_name = Column(String(255), nullable=False)
    canvas_image = Column(String(255), nullable=True)
    canvas_email = Column(String(255), nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    share_points = Column(Boolean, nullable=True)
    points = Column(Integer, nullable=False, default=0)
    last_activity = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    course = relationship("Course")

    __table_args__ = (
        UniqueConstraint("course_id", "canvas_user_id", name="uq_users_course_canvas_user"),
    )

"""JWT course tokens issued after LTI launch."""
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from apps.backend.config import get_settings
from apps.backend.deps import get_db
from apps.backend.models.course import Course
from apps.backend.models.user import User

security = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    s = get_settings()
    to_encode = data.copy()
    exp = expires_delta or timedelta(minutes=s.jwt_expire_minutes)
    to_encode.update({"exp": datetime.utcnow() + exp})
    return jwt.encode(to_encode, s.jwt_secret, algorithm=s.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    s = get_settings()
    try:
        return jwt.decode(token, s.jwt_secret, algorithms=[s.jwt_algorithm])
    except JWTError:
        return None


def create_course_token(user_id: int, course_id: int, expires_minutes: int | None = None) -> str:
    """Token for a course user (sub=user id, course=course id)."""
    delta = timedelta(minutes=expires_minutes) if expires_minutes else None
    return create_access_token({"sub": str(user_id), "course": int(course_id), "type": "course"}, delta)


def get_course_context(
    course_id: int,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> tuple[User, Course]:
    """Resolve the calling user and the course from the path; the token must belong to that course."""
    if not credentials:
        raise HTTPException(status_code=401, detail="Authorization required")
    payload = decode_token(credentials.credentials)
    if not payload or "sub" not in payload or payload.get("type") != "course":
        raise HTTPException(status_code=401, detail="Invalid token")
    try:
        user_id = int(payload["sub"])
        token_course_id = int(payload.get("course"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")
    if token_course_id != course_id:
        raise HTTPException(status_code=403, detail="Token was issued for another course")
    course = db.get(Course, course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    user = db.get(User, user_id)
    if not user or user.course_id != course.id:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user, course

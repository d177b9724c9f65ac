"""Manual triggers for the digest emails of one course (admins only)."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from apps.backend.auth import get_course_context
from apps.backend.deps import get_db
from apps.backend.services.daily_digest import send_daily_digest_for_course
from apps.backend.services.weekly_digest import send_weekly_digest_for_course

router = APIRouter()


# GET because these are entered into the browser by an administrator.
@router.get("/{course_id}/activities/notifications/send_weekly")
def send_weekly(
    course_id: int,
    ctx=Depends(get_course_context),
    db: Session = Depends(get_db),
):
    user, course = ctx
    send_weekly_digest_for_course(db, user, course)
    return {"sending": True}


@router.get("/{course_id}/activities/notifications/send_daily")
def send_daily(
    course_id: int,
    ctx=Depends(get_course_context),
    db: Session = Depends(get_db),
):
    user, course = ctx
    send_daily_digest_for_course(db, user, course)
    return {"sending": True}

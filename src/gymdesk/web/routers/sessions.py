"""Training session routes."""

from datetime import date

from fastapi import APIRouter, Request
from fastapi.responses import Response
from pydantic import BaseModel

from ...exports import session_csv_filename, sessions_to_csv
from ...models.training_session import SessionType
from ...schemas import SessionCreate
from ...services import (
    SessionLimitService,
    TrainingSessionService,
    get_capacity_color_scheme,
    get_week_range,
)
from . import get_db_path

router = APIRouter(prefix="/sessions", tags=["sessions"])


class WeeklyLimitsUpdate(BaseModel):
    studio: int | None = None
    member: int | None = None


@router.post("", status_code=201)
async def book_session(request: Request, data: SessionCreate):
    session = await TrainingSessionService(get_db_path(request)).book_session(data)
    return session.to_dict()


@router.get("")
async def session_history(
    request: Request,
    trainer_id: int | None = None,
    member_id: int | None = None,
    start: date | None = None,
    end: date | None = None,
):
    sessions = await TrainingSessionService(get_db_path(request)).get_session_history(
        trainer_id, member_id, start, end
    )
    return {"sessions": [s.to_dict() for s in sessions]}


@router.get("/export.csv")
async def export_sessions(
    request: Request,
    trainer_id: int | None = None,
    member_id: int | None = None,
    start: date | None = None,
    end: date | None = None,
):
    sessions = await TrainingSessionService(get_db_path(request)).get_session_history(
        trainer_id, member_id, start, end
    )
    return Response(
        content=sessions_to_csv(sessions),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{session_csv_filename()}"'},
    )


@router.get("/limits/studio")
async def studio_limit(request: Request, day: date | None = None):
    """Studio-wide capacity for the week containing ``day`` (default today)."""
    day = day or date.today()
    week_start, week_end = get_week_range(day)
    limit = await SessionLimitService(get_db_path(request)).check_studio_session_limit(day)
    return {
        "week_start": week_start.isoformat(),
        "week_end": week_end.isoformat(),
        **limit.to_dict(),
        "color_scheme": get_capacity_color_scheme(limit.percentage).to_dict(),
    }


@router.put("/limits")
async def update_limits(request: Request, data: WeeklyLimitsUpdate):
    changes = await SessionLimitService(get_db_path(request)).set_weekly_limits(
        studio=data.studio, member=data.member
    )
    return {"updated": changes}


@router.get("/limits/member/{member_id}")
async def member_limit(
    request: Request,
    member_id: int,
    day: date | None = None,
    session_type: SessionType = SessionType.MEMBER,
):
    day = day or date.today()
    week_start, week_end = get_week_range(day)
    result = await SessionLimitService(get_db_path(request)).check_member_weekly_limit(
        member_id, day, session_type
    )
    return {
        "week_start": week_start.isoformat(),
        "week_end": week_end.isoformat(),
        **result.to_dict(),
    }


@router.post("/{session_id}/cancel")
async def cancel_session(request: Request, session_id: int):
    session = await TrainingSessionService(get_db_path(request)).cancel_session(session_id)
    return session.to_dict()


@router.get("/{session_id}")
async def get_session(request: Request, session_id: int):
    session = await TrainingSessionService(get_db_path(request)).get_session(session_id)
    return session.to_dict()

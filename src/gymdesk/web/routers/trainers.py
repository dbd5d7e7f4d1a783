"""Trainer routes."""

from fastapi import APIRouter, Body, Path, Query, Request
from fastapi.responses import Response
from pydantic import BaseModel

from ...exports import generate_csv_filename, trainers_to_csv
from ...forms import STEPS, TrainerWizard
from ...models.trainer import TrainerFilters
from ...services import TrainerService
from . import get_db_path

router = APIRouter(prefix="/trainers", tags=["trainers"])


class AvailabilityUpdate(BaseModel):
    trainer_ids: list[int]
    is_accepting: bool


@router.get("/form/steps")
async def form_steps():
    """Step layout of the trainer creation form."""
    return {
        "steps": [
            {
                "id": step.id,
                "title": step.title,
                "description": step.description,
                "optional": step.is_optional,
                "fields": step.fields,
            }
            for step in STEPS
        ]
    }


@router.post("/form/validate/{step_id}")
async def validate_form_step(
    step_id: int = Path(ge=1, le=len(STEPS)), data: dict = Body(...)
):
    """Validate one step of the trainer form without saving anything."""
    TrainerWizard(data).validate_step(step_id)
    return {"step": step_id, "valid": True}


@router.post("", status_code=201)
async def create_trainer(request: Request, data: dict = Body(...)):
    """Create a trainer from the full form (commission_rate in percent)."""
    payload = TrainerWizard(data).submit()
    trainer = await TrainerService(get_db_path(request)).create_trainer(payload)
    return trainer.to_dict()


@router.get("")
async def list_trainers(
    request: Request,
    search: str | None = None,
    specialization: list[str] = Query(default=[]),
    accepting: bool | None = None,
    min_experience: int | None = None,
    max_experience: int | None = None,
    limit: int | None = None,
    offset: int | None = None,
):
    filters = TrainerFilters(
        search=search,
        specializations=specialization,
        is_accepting_new_clients=accepting,
        years_experience_min=min_experience,
        years_experience_max=max_experience,
        limit=limit,
        offset=offset,
    )
    trainers = await TrainerService(get_db_path(request)).get_trainers(filters)
    return {"trainers": [t.to_dict() for t in trainers], "count": len(trainers)}


@router.get("/search")
async def search_trainers(request: Request, q: str = ""):
    trainers = await TrainerService(get_db_path(request)).search_trainers(q)
    return {"trainers": [t.to_dict() for t in trainers]}


@router.get("/stats")
async def trainer_stats(request: Request):
    service = TrainerService(get_db_path(request))
    return {
        "total": await service.get_trainer_count(),
        "by_status": await service.get_trainer_count_by_status(),
    }


@router.get("/available")
async def available_trainers(request: Request):
    trainers = await TrainerService(get_db_path(request)).get_available_trainers()
    return {"trainers": [t.to_dict() for t in trainers]}


@router.get("/expiring-certifications")
async def expiring_certifications(request: Request, days: int = 30):
    service = TrainerService(get_db_path(request))
    trainers = await service.get_trainers_with_expiring_certifications(days)
    return {"days": days, "trainers": [t.to_dict() for t in trainers]}


@router.get("/code-exists")
async def code_exists(request: Request, code: str, exclude_id: int | None = None):
    exists = await TrainerService(get_db_path(request)).check_trainer_code_exists(
        code, exclude_id
    )
    return {"code": code, "exists": exists}


@router.get("/export.csv")
async def export_trainers(request: Request, search: str | None = None):
    trainers = await TrainerService(get_db_path(request)).get_trainers(
        TrainerFilters(search=search)
    )
    return Response(
        content=trainers_to_csv(trainers),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{generate_csv_filename()}"'},
    )


@router.patch("/availability")
async def bulk_availability(request: Request, data: AvailabilityUpdate):
    updated = await TrainerService(get_db_path(request)).bulk_update_trainer_availability(
        data.trainer_ids, data.is_accepting
    )
    return {"updated": updated}


@router.get("/specialization/{name}")
async def trainers_by_specialization(request: Request, name: str):
    trainers = await TrainerService(get_db_path(request)).get_trainers_by_specialization(name)
    return {"trainers": [t.to_dict() for t in trainers]}


@router.get("/{trainer_id}")
async def get_trainer(request: Request, trainer_id: int):
    trainer = await TrainerService(get_db_path(request)).get_trainer(trainer_id)
    return trainer.to_dict()


@router.patch("/{trainer_id}")
async def update_trainer(request: Request, trainer_id: int, changes: dict = Body(...)):
    """Partial update; ``commission_rate`` here is a fraction as stored."""
    trainer = await TrainerService(get_db_path(request)).update_trainer(trainer_id, changes)
    return trainer.to_dict()


@router.delete("/{trainer_id}", status_code=204)
async def delete_trainer(request: Request, trainer_id: int):
    await TrainerService(get_db_path(request)).delete_trainer(trainer_id)
    return Response(status_code=204)

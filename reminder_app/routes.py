import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from reminder_app import schemas
from reminder_app.errors import EmptyTitleError, PersistenceFailure, ReminderNotFoundError
from reminder_app.features.reminders import service as reminder_service
from reminder_app.features.reminders.manager import ReminderManager

logger = logging.getLogger("reminder_app.routes")
router = APIRouter(tags=["Reminders"])


def get_manager() -> ReminderManager:
    try:
        return reminder_service.get_manager()
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))


def _out(reminder) -> schemas.ReminderOut:
    return schemas.ReminderOut.model_validate(reminder)


@router.get("/reminders", response_model=schemas.ReminderList)
async def list_reminders(category: Optional[schemas.Category] = None, manager: ReminderManager = Depends(get_manager)):
    reminders = [_out(r) for r in manager.list(category)]
    return {"count": len(reminders), "reminders": reminders}


@router.get("/reminders/{reminder_id}", response_model=schemas.ReminderOut)
async def get_reminder(reminder_id: str, manager: ReminderManager = Depends(get_manager)):
    try:
        return _out(manager.get(reminder_id))
    except ReminderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/reminders", response_model=schemas.ReminderResponse, status_code=201)
async def create_reminder(body: schemas.ReminderCreate, manager: ReminderManager = Depends(get_manager)):
    try:
        outcome = await manager.create(body.title, body.category, body.repeat, body.occurs_at)
    except EmptyTitleError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except PersistenceFailure as e:
        logger.error("Create failed: %s", e)
        raise HTTPException(status_code=503, detail="Could not save reminder")
    return {"reminder": _out(outcome.reminder), "warnings": [str(w) for w in outcome.warnings]}


@router.put("/reminders/{reminder_id}", response_model=schemas.ReminderResponse)
async def edit_reminder(reminder_id: str, body: schemas.ReminderUpdate, manager: ReminderManager = Depends(get_manager)):
    try:
        outcome = await manager.edit(reminder_id, body.title, body.category, body.repeat, body.occurs_at)
    except ReminderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EmptyTitleError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except PersistenceFailure as e:
        logger.error("Edit of %s failed: %s", reminder_id, e)
        raise HTTPException(status_code=503, detail="Could not save reminder")
    return {"reminder": _out(outcome.reminder), "warnings": [str(w) for w in outcome.warnings]}


@router.delete("/reminders/{reminder_id}", response_model=schemas.DeleteReminderResponse)
async def delete_reminder(reminder_id: str, manager: ReminderManager = Depends(get_manager)):
    try:
        outcome = await manager.delete(reminder_id)
    except ReminderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceFailure as e:
        logger.error("Delete of %s failed: %s", reminder_id, e)
        raise HTTPException(status_code=503, detail="Could not save reminders")
    return {"id": reminder_id, "deleted": True, "warnings": [str(w) for w in outcome.warnings]}


@router.get("/permission", response_model=schemas.PermissionOut)
async def get_permission():
    status = reminder_service.get_permission_status()
    return {"status": status.value, "granted": status.value == "granted"}

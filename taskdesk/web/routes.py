"""
Web routes for the scheduled-task trigger and the dashboard API.
"""

import logging

from fastapi import APIRouter, Request, HTTPException, Response
from fastapi.responses import JSONResponse

from ..database.exceptions import EntityNotFoundError
from ..database.repositories import get_task_repository, get_user_repository
from ..models.api_validation import TemplateCreate
from ..models.scheduling import frequency_label, UNKNOWN_USER_NAME
from ..scheduler.recurrence import RecurrenceCalculator
from ..scheduler.runner import ScheduledTaskRunner, ScheduleFetchError
from ..utils.datetime_utils import to_iso_utc, to_naive_utc

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _serialize_task(task, user_names: dict = None) -> dict:
    data = task.to_dict()
    for key in ("next_scheduled_at", "last_created_at", "created_at"):
        data[key] = to_iso_utc(data[key])
    if user_names is not None:
        data["user_name"] = user_names.get(task.user_id) or UNKNOWN_USER_NAME
        data["frequency_label"] = frequency_label(task.frequency)
        data["is_recurring"] = RecurrenceCalculator.is_recurring(task.frequency)
    return data


# ============================================================================
# Scheduled task creation trigger
# ============================================================================

@router.api_route("/functions/create-scheduled-tasks", methods=["GET", "POST", "OPTIONS"])
async def create_scheduled_tasks(request: Request):
    """Run the scheduled task job once and report what it did."""
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    try:
        runner = ScheduledTaskRunner()
        summary = await runner.run()
        return JSONResponse(status_code=200, content=summary.to_response(), headers=CORS_HEADERS)

    except ScheduleFetchError as e:
        logger.error(f"Fatal error in create-scheduled-tasks: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)}, headers=CORS_HEADERS)


# ============================================================================
# Dashboard API
# ============================================================================

@router.get("/api/scheduled-tasks")
async def list_scheduled_tasks():
    """List recurring templates with their assignee name and frequency label."""
    task_repo = get_task_repository()
    user_repo = get_user_repository()

    templates = await task_repo.get_templates(recurring_only=True)
    directory = await user_repo.get_directory()
    user_names = {u["id"]: u["name"] for u in directory}

    return {
        "tasks": [_serialize_task(t, user_names) for t in templates],
        "count": len(templates),
    }


@router.post("/api/scheduled-tasks", status_code=201)
async def create_scheduled_task(data: TemplateCreate):
    """Create a recurring template."""
    task_repo = get_task_repository()

    task_data = data.model_dump()
    task_data["frequency"] = data.frequency.value
    task_data["next_scheduled_at"] = to_naive_utc(data.next_scheduled_at)

    template = await task_repo.create_template(task_data)
    return {"ok": True, "task": _serialize_task(template)}


@router.get("/api/scheduled-tasks/{task_id}/instances")
async def list_instances(task_id: int):
    """List the tasks a template has created."""
    task_repo = get_task_repository()

    template = await task_repo.get_by_id(task_id)
    if not template or not template.is_template:
        raise HTTPException(status_code=404, detail=f"Scheduled task {task_id} not found")

    instances = await task_repo.get_instances(task_id)
    return {
        "template_id": task_id,
        "instances": [_serialize_task(t) for t in instances],
        "count": len(instances),
    }


@router.delete("/api/scheduled-tasks/{task_id}")
async def delete_scheduled_task(task_id: int):
    """Delete a template. Tasks it already created are kept."""
    task_repo = get_task_repository()

    try:
        await task_repo.delete(task_id)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail=f"Scheduled task {task_id} not found")

    return {"ok": True, "message": f"Scheduled task {task_id} deleted"}


@router.get("/api/users")
async def list_users():
    """List users tasks can be assigned to."""
    user_repo = get_user_repository()
    users = await user_repo.get_all()

    return {
        "users": [
            {
                "id": u.id,
                "name": u.name,
                "phone": u.phone,
                "role": u.role,
                "created_at": to_iso_utc(u.created_at),
            }
            for u in users
        ],
        "count": len(users),
    }

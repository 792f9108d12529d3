"""Task routes

GET /api/tasks/{task_id}: task detail, including the report badge and the
parent report of follow-up tasks.
"""

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from ..deps import get_store_group

router = APIRouter()


@router.get("/api/tasks/{task_id}")
async def get_task_detail(
    task_id: str,
    store_group=Depends(get_store_group),
):
    """Task detail"""
    task = await store_group.task_store.get_task(task_id)

    if task is None:
        return JSONResponse(
            status_code=404,
            content={
                "error": {
                    "code": "TASK_NOT_FOUND",
                    "message": f"Task with id {task_id} does not exist",
                }
            },
        )

    return {"task": task.model_dump(mode="json")}

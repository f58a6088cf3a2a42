from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from fieldtasks.db.session import get_db
from fieldtasks.schemas.task import TaskIn, TaskOut
from fieldtasks.core.security import get_current_claims, require_manager
from fieldtasks.core.response_builders import build_task_response, build_task_response_list
from fieldtasks.services import tasks as task_service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=List[TaskOut])
async def list_tasks(db: AsyncSession = Depends(get_db), claims=Depends(get_current_claims)):
    tasks = await task_service.list_tasks(db)
    return build_task_response_list(tasks)


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
async def create_task(payload: TaskIn, db: AsyncSession = Depends(get_db), claims=Depends(get_current_claims)):
    task = await task_service.create_task(db, payload)
    return build_task_response(task)


@router.put("/{task_id}", response_class=PlainTextResponse)
async def update_task(
    task_id: int,
    payload: TaskIn,
    db: AsyncSession = Depends(get_db),
    claims=Depends(get_current_claims)
):
    """Full replacement of a task's mutable fields"""
    await task_service.update_task(db, task_id, payload)
    return f"Task {task_id} updated successfully"


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: int, db: AsyncSession = Depends(get_db), claims=Depends(require_manager)):
    await task_service.delete_task(db, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

import logging

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from fieldtasks.core.errors import Internal, NotFound
from fieldtasks.core.metrics import track_db_operation
from fieldtasks.models.task import Task
from fieldtasks.schemas.task import TaskIn

logger = logging.getLogger(__name__)


def _task_values(payload: TaskIn) -> dict:
    return {
        "title": payload.title,
        "description": payload.description,
        "status": payload.status,
        "priority": payload.priority,
        "technician_id": payload.technician_id,
        "client": payload.client,
    }


@track_db_operation("list", "tasks")
async def list_tasks(db: AsyncSession) -> list[Task]:
    try:
        res = await db.execute(select(Task).order_by(Task.created_at.desc(), Task.id.desc()))
        return list(res.scalars().all())
    except SQLAlchemyError as e:
        logger.error(f"Listing tasks failed: {e}")
        raise Internal()


@track_db_operation("create", "tasks")
async def create_task(db: AsyncSession, payload: TaskIn) -> Task:
    task = Task(**_task_values(payload))
    db.add(task)
    try:
        await db.commit()
        await db.refresh(task)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Creating task failed: {e}")
        raise Internal()

    logger.info(f"Task {task.id} created")
    return task


@track_db_operation("update", "tasks")
async def update_task(db: AsyncSession, task_id: int, payload: TaskIn) -> None:
    """Replace every mutable field of the task; NotFound if no row matched."""
    try:
        res = await db.execute(update(Task).where(Task.id == task_id).values(**_task_values(payload)))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Updating task {task_id} failed: {e}")
        raise Internal("Database update failed")

    if res.rowcount == 0:
        raise NotFound("Task", task_id)
    logger.info(f"Task {task_id} updated")


@track_db_operation("delete", "tasks")
async def delete_task(db: AsyncSession, task_id: int) -> None:
    try:
        res = await db.execute(delete(Task).where(Task.id == task_id))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Deleting task {task_id} failed: {e}")
        raise Internal()

    if res.rowcount:
        logger.info(f"Task {task_id} deleted")

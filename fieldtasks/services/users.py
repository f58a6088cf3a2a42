import logging

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from fieldtasks.core.enums import UserRole
from fieldtasks.core.errors import Conflict, Internal, NotFound
from fieldtasks.core.metrics import track_db_operation
from fieldtasks.models.task import Task
from fieldtasks.models.user import User
from fieldtasks.schemas.user import ProfileUpdate, UserUpdate

logger = logging.getLogger(__name__)


async def _apply_user_update(db: AsyncSession, user_id: int, values: dict) -> None:
    try:
        res = await db.execute(update(User).where(User.id == user_id).values(**values))
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Updating user {user_id} rejected: {e}")
        raise Conflict("Email already in use")
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Updating user {user_id} failed: {e}")
        raise Internal("Update failed")

    if res.rowcount == 0:
        raise NotFound("User", user_id)


@track_db_operation("list", "users")
async def list_users_by_role(db: AsyncSession, role: UserRole) -> list[User]:
    try:
        res = await db.execute(select(User).where(User.role == role).order_by(User.id))
        return list(res.scalars().all())
    except SQLAlchemyError as e:
        logger.error(f"Listing users with role {role} failed: {e}")
        raise Internal()


@track_db_operation("update", "users")
async def update_user(db: AsyncSession, user_id: int, payload: UserUpdate) -> None:
    await _apply_user_update(db, user_id, {"name": payload.name, "email": payload.email, "role": payload.role})
    logger.info(f"User {user_id} updated")


@track_db_operation("update", "users")
async def update_profile(db: AsyncSession, user_id: int, payload: ProfileUpdate) -> User:
    await _apply_user_update(db, user_id, {"name": payload.name, "email": payload.email})

    try:
        res = await db.execute(select(User).where(User.id == user_id))
        user = res.scalars().first()
    except SQLAlchemyError as e:
        logger.error(f"Reloading user {user_id} failed: {e}")
        raise Internal()

    if user is None:
        raise NotFound("User", user_id)
    logger.info(f"User {user_id} updated own profile")
    return user


@track_db_operation("update", "users")
async def update_user_role(db: AsyncSession, user_id: int, role: UserRole) -> None:
    await _apply_user_update(db, user_id, {"role": role})
    logger.info(f"User {user_id} role set to {role}")


@track_db_operation("delete", "users")
async def delete_user(db: AsyncSession, user_id: int) -> None:
    """Unassign the user's tasks, then remove the user. Absent ids succeed."""
    try:
        await db.execute(update(Task).where(Task.technician_id == user_id).values(technician_id=None))
        res = await db.execute(delete(User).where(User.id == user_id))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Deleting user {user_id} failed: {e}")
        raise Internal("Delete failed")

    if res.rowcount:
        logger.info(f"User {user_id} deleted")

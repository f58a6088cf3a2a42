from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, ForeignKey, Enum, DateTime, func
from fieldtasks.models.base import BaseModel
from fieldtasks.core.enums import TaskStatus, TaskPriority


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Task(BaseModel):
    __tablename__ = "tasks"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    status = Column(
        Enum(TaskStatus, native_enum=False, length=20),
        nullable=False,
        default=TaskStatus.PENDING,
        server_default=TaskStatus.PENDING.value,
    )
    priority = Column(
        Enum(TaskPriority, native_enum=False, length=20),
        nullable=False,
        default=TaskPriority.MEDIUM,
        server_default=TaskPriority.MEDIUM.value,
    )
    technician_id = Column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    client = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now())

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime
from fieldtasks.core.enums import TaskStatus, TaskPriority


class TaskIn(BaseModel):
    """Body of task create and full-replacement update."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    technician_id: Optional[int] = None
    client: str


class TaskOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    technician_id: Optional[int] = None
    client: str
    created_at: datetime

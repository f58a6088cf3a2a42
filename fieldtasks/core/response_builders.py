from fieldtasks.models.task import Task
from fieldtasks.models.user import User
from fieldtasks.schemas.task import TaskOut
from fieldtasks.schemas.user import UserOut


def build_task_response(task: Task) -> TaskOut:
    return TaskOut(
        id=task.id,
        title=task.title,
        description=task.description or "",
        status=task.status,
        priority=task.priority,
        technician_id=task.technician_id,
        client=task.client,
        created_at=task.created_at,
    )


def build_user_response(user: User) -> UserOut:
    # UserOut has no password field
    return UserOut(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
    )


def build_task_response_list(tasks: list) -> list:
    return [build_task_response(task) for task in tasks]


def build_user_response_list(users: list) -> list:
    return [build_user_response(user) for user in users]

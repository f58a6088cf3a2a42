from enum import Enum


class UserRole(str, Enum):
    MANAGER = "MANAGER"
    TECHNICIAN = "TECHNICIAN"

    def __str__(self):
        return self.value


class TaskStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"

    def __str__(self):
        return self.value


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    def __str__(self):
        return self.value

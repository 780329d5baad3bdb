"""枚举定义 -- 用户角色、任务状态、任务优先级

三个枚举都是封闭集合，reducer 和派生视图对它们的分支必须穷尽。
TaskStatus 只规定看板列的展示顺序，不限制状态之间的流转。
"""

from enum import StrEnum


class UserRole(StrEnum):
    """用户角色"""

    ADMIN = "admin"
    USER = "user"


class TaskStatus(StrEnum):
    """任务状态 -- 看板三列"""

    CREATED = "created"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(StrEnum):
    """任务优先级"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# 看板列顺序（工作流顺序，仅用于展示）
STATUS_ORDER: tuple[TaskStatus, ...] = (
    TaskStatus.CREATED,
    TaskStatus.IN_PROGRESS,
    TaskStatus.COMPLETED,
)

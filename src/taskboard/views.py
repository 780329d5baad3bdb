"""派生视图 -- 规范状态的只读投影

全部是纯函数：输入任务/用户集合和参考时间 now，不修改任何状态，也不缓存，
每次调用都重新计算。
无时区的 now 与实体时间戳一样按 UTC 处理。
"""

import math
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta

from pydantic import BaseModel, Field

from .config import DUE_SOON_WINDOW, RECENT_WINDOW
from .models import STATUS_ORDER, Task, TaskPriority, TaskStatus, User
from .models.base import ensure_utc


def board_tasks(tasks: Iterable[Task], board_id: str | None) -> list[Task]:
    """属于指定看板的任务，保持原有相对顺序"""
    return [t for t in tasks if t.board_id == board_id]


def status_counts(tasks: Iterable[Task]) -> dict[TaskStatus, int]:
    """按状态计数（每个状态都有键，缺省为 0）"""
    counts = dict.fromkeys(STATUS_ORDER, 0)
    for task in tasks:
        counts[task.status] += 1
    return counts


def priority_counts(tasks: Iterable[Task]) -> dict[TaskPriority, int]:
    counts = dict.fromkeys(TaskPriority, 0)
    for task in tasks:
        counts[task.priority] += 1
    return counts


def _percent(part: int, total: int) -> int:
    # 四舍五入（0.5 向上），total 为 0 时为 0
    if total == 0:
        return 0
    return math.floor(part * 100 / total + 0.5)


def completion_rate(tasks: Iterable[Task]) -> int:
    """完成率百分比：round(completed / total * 100)，无任务时为 0"""
    tasks = list(tasks)
    completed = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED)
    return _percent(completed, len(tasks))


def is_overdue(task: Task, now: datetime) -> bool:
    """已过截止时间且未完成"""
    now = ensure_utc(now)
    return (
        task.deadline is not None
        and task.deadline < now
        and task.status != TaskStatus.COMPLETED
    )


def is_due_soon(
    task: Task,
    now: datetime,
    window: timedelta = DUE_SOON_WINDOW,
) -> bool:
    """截止时间落在 (now, now + window) 之间"""
    now = ensure_utc(now)
    return task.deadline is not None and now < task.deadline < now + window


def overdue_tasks(tasks: Iterable[Task], now: datetime) -> list[Task]:
    return [t for t in tasks if is_overdue(t, now)]


def due_soon_tasks(tasks: Iterable[Task], now: datetime) -> list[Task]:
    return [t for t in tasks if is_due_soon(t, now)]


def recent_tasks(
    tasks: Iterable[Task],
    now: datetime,
    window: timedelta = RECENT_WINDOW,
) -> list[Task]:
    """now - window 之后创建的任务"""
    since = ensure_utc(now) - window
    return [t for t in tasks if t.created_at > since]


def tasks_for_day(tasks: Iterable[Task], day: date) -> list[Task]:
    """截止日期落在指定日期的任务（日历视图）"""
    return [t for t in tasks if t.deadline is not None and t.deadline.date() == day]


def pinned_first(tasks: Iterable[Task]) -> list[Task]:
    """置顶任务排在前面，其余保持原顺序"""
    return sorted(tasks, key=lambda t: not t.is_pinned)


def tasks_by_status(tasks: Iterable[Task]) -> dict[TaskStatus, list[Task]]:
    """看板三列：按状态分组，每列内置顶优先"""
    tasks = list(tasks)
    return {
        status: pinned_first(t for t in tasks if t.status == status)
        for status in STATUS_ORDER
    }


class UserTaskStats(BaseModel):
    """单个用户的任务统计（按执行人统计）"""

    user_id: str
    name: str
    total: int = 0
    created: int = 0
    in_progress: int = 0
    completed: int = 0
    completion_rate: int = Field(default=0, description="完成率百分比")


def user_task_stats(users: Iterable[User], tasks: Iterable[Task]) -> list[UserTaskStats]:
    """每个用户作为执行人的任务数量，按状态拆分"""
    tasks = list(tasks)
    stats: list[UserTaskStats] = []
    for user in users:
        assigned = [t for t in tasks if t.assignee_id == user.id]
        counts = status_counts(assigned)
        stats.append(
            UserTaskStats(
                user_id=user.id,
                name=user.name,
                total=len(assigned),
                created=counts[TaskStatus.CREATED],
                in_progress=counts[TaskStatus.IN_PROGRESS],
                completed=counts[TaskStatus.COMPLETED],
                completion_rate=_percent(counts[TaskStatus.COMPLETED], len(assigned)),
            )
        )
    return stats


class BoardReport(BaseModel):
    """看板统计汇总"""

    total: int
    by_status: dict[TaskStatus, int]
    by_priority: dict[TaskPriority, int]
    completion_rate: int
    overdue: int
    due_soon: int
    recent: int
    users: list[UserTaskStats]


def build_board_report(
    users: Sequence[User],
    tasks: Sequence[Task],
    now: datetime,
) -> BoardReport:
    """汇总一个看板（通常是当前看板）的全部统计数据"""
    return BoardReport(
        total=len(tasks),
        by_status=status_counts(tasks),
        by_priority=priority_counts(tasks),
        completion_rate=completion_rate(tasks),
        overdue=len(overdue_tasks(tasks, now)),
        due_soon=len(due_soon_tasks(tasks, now)),
        recent=len(recent_tasks(tasks, now)),
        users=user_task_stats(users, tasks),
    )

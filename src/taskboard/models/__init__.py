"""taskboard Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .board import Board, BoardPatch
from .drafts import BoardDraft, TaskDraft, UserDraft
from .enums import STATUS_ORDER, TaskPriority, TaskStatus, UserRole
from .state import AppState, Session
from .task import Comment, Task, TaskPatch
from .user import User, UserPatch, is_email_unique, is_name_unique

__all__ = [
    # 枚举
    "UserRole",
    "TaskStatus",
    "TaskPriority",
    "STATUS_ORDER",
    # User
    "User",
    "UserPatch",
    "is_email_unique",
    "is_name_unique",
    "UserDraft",
    # Board
    "Board",
    "BoardPatch",
    "BoardDraft",
    # Task
    "Task",
    "TaskPatch",
    "TaskDraft",
    "Comment",
    # State
    "Session",
    "AppState",
]

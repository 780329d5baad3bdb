"""Action 定义 -- 规范状态的全部变更指令

每种 action 一个模型，按 kind 字段区分（tagged union）。
reducer 对 Action 的分支必须穷尽，新增 action 时类型检查会指出遗漏。
时间戳由 AppStore 写入 action，reducer 不读取系统时钟。
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .models import (
    Board,
    BoardPatch,
    Comment,
    Task,
    TaskPatch,
    User,
    UserPatch,
)
from .models.base import Timestamp


class _ActionBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class Login(_ActionBase):
    """登录：设置当前用户"""

    kind: Literal["login"] = "login"
    user: User


class Logout(_ActionBase):
    """登出：清空当前用户"""

    kind: Literal["logout"] = "logout"


class SetUsers(_ActionBase):
    """整体替换用户集合（仅用于启动加载）"""

    kind: Literal["set_users"] = "set_users"
    users: tuple[User, ...]


class SetTasks(_ActionBase):
    """整体替换任务集合（仅用于启动加载）"""

    kind: Literal["set_tasks"] = "set_tasks"
    tasks: tuple[Task, ...]


class SetBoards(_ActionBase):
    """整体替换看板集合（仅用于启动加载）"""

    kind: Literal["set_boards"] = "set_boards"
    boards: tuple[Board, ...]


class SetCurrentBoard(_ActionBase):
    kind: Literal["set_current_board"] = "set_current_board"
    board_id: str


class AddTask(_ActionBase):
    kind: Literal["add_task"] = "add_task"
    task: Task


class UpdateTask(_ActionBase):
    """合并部分字段并刷新 updated_at

    append_comments 中的评论按顺序追加到任务末尾。
    """

    kind: Literal["update_task"] = "update_task"
    task_id: str
    patch: TaskPatch = Field(default_factory=TaskPatch)
    append_comments: tuple[Comment, ...] = ()
    at: Timestamp = Field(description="本次修改时间")


class DeleteTask(_ActionBase):
    kind: Literal["delete_task"] = "delete_task"
    task_id: str


class AddUser(_ActionBase):
    kind: Literal["add_user"] = "add_user"
    user: User


class UpdateUser(_ActionBase):
    """合并部分字段（User 没有 updated_at）"""

    kind: Literal["update_user"] = "update_user"
    user_id: str
    patch: UserPatch


class DeleteUser(_ActionBase):
    kind: Literal["delete_user"] = "delete_user"
    user_id: str


class AddBoard(_ActionBase):
    kind: Literal["add_board"] = "add_board"
    board: Board


class UpdateBoard(_ActionBase):
    kind: Literal["update_board"] = "update_board"
    board_id: str
    patch: BoardPatch
    at: Timestamp = Field(description="本次修改时间")


class DeleteBoard(_ActionBase):
    kind: Literal["delete_board"] = "delete_board"
    board_id: str


Action = Annotated[
    Login
    | Logout
    | SetUsers
    | SetTasks
    | SetBoards
    | SetCurrentBoard
    | AddTask
    | UpdateTask
    | DeleteTask
    | AddUser
    | UpdateUser
    | DeleteUser
    | AddBoard
    | UpdateBoard
    | DeleteBoard,
    Field(discriminator="kind"),
]

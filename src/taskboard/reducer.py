"""Reducer -- (当前状态, action) -> 下一状态

纯函数：不读时钟、不做唯一性校验、不抛异常。
对不存在的 ID 执行 Update/Delete 是 no-op，重复删除是安全的。
没有实际变化时返回原集合对象，便于调用方判断是否需要持久化。
"""

from datetime import datetime, timedelta
from typing import TypeVar, assert_never

from .actions import (
    Action,
    AddBoard,
    AddTask,
    AddUser,
    DeleteBoard,
    DeleteTask,
    DeleteUser,
    Login,
    Logout,
    SetBoards,
    SetCurrentBoard,
    SetTasks,
    SetUsers,
    UpdateBoard,
    UpdateTask,
    UpdateUser,
)
from .models import AppState, Board, Task, User

# updated_at 的最小递增量
_TICK = timedelta(microseconds=1)

_E = TypeVar("_E", User, Task, Board)


def _bump(previous: datetime, at: datetime) -> datetime:
    """保证 updated_at 严格大于上一次的值"""
    return at if at > previous else previous + _TICK


def _without(items: tuple[_E, ...], entity_id: str) -> tuple[_E, ...]:
    if not any(item.id == entity_id for item in items):
        return items
    return tuple(item for item in items if item.id != entity_id)


def _apply_task_update(task: Task, action: UpdateTask) -> Task:
    update = action.patch.changes()
    if action.append_comments:
        update["comments"] = [*task.comments, *action.append_comments]
    update["updated_at"] = _bump(task.updated_at, action.at)
    return task.model_copy(update=update)


def reduce(state: AppState, action: Action) -> AppState:
    """将单个 action 应用到规范状态

    Args:
        state: 当前状态（不会被修改）
        action: 要应用的 action

    Returns:
        新状态；没有任何变化时返回原对象
    """
    session = state.session

    if isinstance(action, Login):
        return state.model_copy(
            update={
                "session": session.model_copy(
                    update={"current_user": action.user, "is_authenticated": True}
                )
            }
        )
    elif isinstance(action, Logout):
        return state.model_copy(
            update={
                "session": session.model_copy(
                    update={"current_user": None, "is_authenticated": False}
                )
            }
        )
    elif isinstance(action, SetUsers):
        return state.model_copy(update={"users": tuple(action.users)})
    elif isinstance(action, SetTasks):
        return state.model_copy(update={"tasks": tuple(action.tasks)})
    elif isinstance(action, SetBoards):
        return state.model_copy(update={"boards": tuple(action.boards)})
    elif isinstance(action, SetCurrentBoard):
        return state.model_copy(
            update={"session": session.model_copy(update={"current_board_id": action.board_id})}
        )

    # Task
    elif isinstance(action, AddTask):
        return state.model_copy(update={"tasks": (*state.tasks, action.task)})
    elif isinstance(action, UpdateTask):
        if not any(t.id == action.task_id for t in state.tasks):
            return state
        tasks = tuple(
            _apply_task_update(t, action) if t.id == action.task_id else t
            for t in state.tasks
        )
        return state.model_copy(update={"tasks": tasks})
    elif isinstance(action, DeleteTask):
        tasks = _without(state.tasks, action.task_id)
        if tasks is state.tasks:
            return state
        return state.model_copy(update={"tasks": tasks})

    # User
    elif isinstance(action, AddUser):
        return state.model_copy(update={"users": (*state.users, action.user)})
    elif isinstance(action, UpdateUser):
        if not any(u.id == action.user_id for u in state.users):
            return state
        changes = action.patch.changes()
        users = tuple(
            u.model_copy(update=changes) if u.id == action.user_id else u
            for u in state.users
        )
        update: dict = {"users": users}
        # 会话里的当前用户跟随资料更新
        current = session.current_user
        if current is not None and current.id == action.user_id:
            update["session"] = session.model_copy(
                update={"current_user": current.model_copy(update=changes)}
            )
        return state.model_copy(update=update)
    elif isinstance(action, DeleteUser):
        users = _without(state.users, action.user_id)
        if users is state.users:
            return state
        return state.model_copy(update={"users": users})

    # Board
    elif isinstance(action, AddBoard):
        return state.model_copy(update={"boards": (*state.boards, action.board)})
    elif isinstance(action, UpdateBoard):
        if not any(b.id == action.board_id for b in state.boards):
            return state
        changes = action.patch.changes()
        boards = tuple(
            b.model_copy(update={**changes, "updated_at": _bump(b.updated_at, action.at)})
            if b.id == action.board_id
            else b
            for b in state.boards
        )
        return state.model_copy(update={"boards": boards})
    elif isinstance(action, DeleteBoard):
        boards = _without(state.boards, action.board_id)
        if boards is state.boards:
            return state
        return state.model_copy(update={"boards": boards})
    else:
        assert_never(action)

"""Session / AppState -- 规范状态（canonical state）

AppState 只由 AppStore 持有；对外暴露的都是深拷贝快照。
集合使用 tuple 保持插入顺序，reducer 每次都构造新的集合对象。
"""

from pydantic import BaseModel, ConfigDict, Field

from .board import Board
from .task import Task
from .user import User


class Session(BaseModel):
    """会话状态：当前用户 + 当前看板"""

    model_config = ConfigDict(frozen=True)

    current_user: User | None = Field(default=None, description="当前登录用户")
    is_authenticated: bool = Field(default=False, description="是否已登录")
    current_board_id: str | None = Field(default=None, description="当前看板 ID")


class AppState(BaseModel):
    """应用规范状态"""

    model_config = ConfigDict(frozen=True)

    users: tuple[User, ...] = Field(default=(), description="用户集合")
    tasks: tuple[Task, ...] = Field(default=(), description="任务集合")
    boards: tuple[Board, ...] = Field(default=(), description="看板集合")
    session: Session = Field(default_factory=Session, description="会话")

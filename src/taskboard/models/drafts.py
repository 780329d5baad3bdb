"""新建实体的输入模型

调用方只提供业务字段；id、created_at、updated_at 由 AppStore 生成，
即使出现在输入里也会被忽略。
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .base import Timestamp
from .enums import TaskPriority, TaskStatus, UserRole
from .task import Comment


class _Draft(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class UserDraft(_Draft):
    """新用户（管理员添加）"""

    email: str = Field(min_length=1)
    name: str = Field(min_length=1)
    role: UserRole = UserRole.USER


class BoardDraft(_Draft):
    """新看板；created_by 缺省为当前登录用户"""

    name: str = Field(min_length=1)
    description: str = ""
    created_by: str | None = None


class TaskDraft(_Draft):
    """新任务；board_id 缺省为当前看板，creator_id 缺省为当前登录用户"""

    title: str = Field(min_length=1)
    description: str = ""
    status: TaskStatus = TaskStatus.CREATED
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee_id: str = ""
    creator_id: str | None = None
    board_id: str | None = None
    deadline: Timestamp | None = None
    is_pinned: bool = False
    attachments: list[str] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)

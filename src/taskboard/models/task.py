"""Task / Comment Domain Model

每个任务恰好属于一个看板（board_id）。
id 和 created_at 创建后不可变；其余字段的任何变更都会刷新 updated_at。
评论只追加，不单独编辑或删除。
"""

from typing import ClassVar

from pydantic import Field

from .base import EntityModel, PatchModel, Timestamp
from .enums import TaskPriority, TaskStatus


class Comment(EntityModel):
    """任务评论"""

    id: str = Field(description="唯一标识，ULID 格式")
    user_id: str = Field(description="作者 User ID")
    content: str = Field(description="评论内容")
    created_at: Timestamp = Field(description="创建时间")


class Task(EntityModel):
    """Task 数据模型"""

    id: str = Field(description="唯一标识，ULID 格式")
    title: str = Field(description="标题")
    description: str = Field(default="", description="描述")
    status: TaskStatus = Field(default=TaskStatus.CREATED, description="当前状态")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="优先级")
    assignee_id: str = Field(default="", description="执行人 User ID，空串表示未分配")
    creator_id: str = Field(default="", description="创建者 User ID")
    board_id: str = Field(description="所属看板 ID")
    deadline: Timestamp | None = Field(default=None, description="截止时间")
    is_pinned: bool = Field(default=False, description="是否置顶")
    attachments: list[str] = Field(default_factory=list, description="附件引用（有序）")
    comments: list[Comment] = Field(default_factory=list, description="评论（有序）")
    created_at: Timestamp = Field(description="创建时间")
    updated_at: Timestamp = Field(description="更新时间")


class TaskPatch(PatchModel):
    """Task 部分更新 -- id、createdAt、updatedAt 即使出现也会被忽略

    评论不在此处修改，只能通过 AppStore.add_comment 追加。
    """

    nullable_fields: ClassVar[frozenset[str]] = frozenset({"deadline"})

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assignee_id: str | None = None
    creator_id: str | None = None
    board_id: str | None = None
    deadline: Timestamp | None = None
    is_pinned: bool | None = None
    attachments: list[str] | None = None

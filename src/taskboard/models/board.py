"""Board Domain Model

看板是任务的命名集合。created_by 只记录创建者 ID，不做外键约束。
"""

from pydantic import Field

from .base import EntityModel, PatchModel, Timestamp


class Board(EntityModel):
    """Board 数据模型"""

    id: str = Field(description="唯一标识，ULID 格式")
    name: str = Field(description="看板名称")
    description: str = Field(default="", description="看板描述")
    created_by: str = Field(default="", description="创建者 User ID")
    created_at: Timestamp = Field(description="创建时间")
    updated_at: Timestamp = Field(description="更新时间")


class BoardPatch(PatchModel):
    """Board 部分更新"""

    name: str | None = None
    description: str | None = None
    created_by: str | None = None

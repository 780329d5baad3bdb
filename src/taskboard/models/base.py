"""实体基类 -- JSON 字段名与持久化格式对齐

后端存储里的字段名是 camelCase（createdAt、boardId ...），
Python 侧统一使用 snake_case，两种写法在输入时都接受。
"""

import copy
from datetime import UTC, datetime
from typing import Annotated, Any, ClassVar

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class EntityModel(BaseModel):
    """不可变实体基类：属性只读，修改通过 model_copy(update=...) 产生新对象"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """导出为可直接写入后端存储的 JSON 结构"""
        return self.model_dump(mode="json", by_alias=True)


class PatchModel(BaseModel):
    """部分更新基类：所有字段可选，未知字段（id、createdAt 等）直接忽略"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    # 允许显式置空的字段；其余字段传 None 视为未修改
    nullable_fields: ClassVar[frozenset[str]] = frozenset()

    def changes(self) -> dict[str, Any]:
        """只返回调用方显式给出的字段

        值是深拷贝，合并进实体后与调用方手里的 patch 不再共享列表等可变对象。
        """
        return {
            name: copy.deepcopy(getattr(self, name))
            for name in self.model_fields_set
            if getattr(self, name) is not None or name in self.nullable_fields
        }


def ensure_utc(value: datetime) -> datetime:
    # 无时区的时间按 UTC 处理，保证所有时间戳可以互相比较
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


Timestamp = Annotated[datetime, AfterValidator(ensure_utc)]

"""User Domain Model + 唯一性校验

邮箱和用户名在任意时刻都必须唯一（大小写不敏感）。
校验谓词无副作用，由 AppStore 在变更前调用；reducer 本身不做校验。
"""

from collections.abc import Iterable

from pydantic import Field

from .base import EntityModel, PatchModel, Timestamp
from .enums import UserRole


class User(EntityModel):
    """User 数据模型"""

    id: str = Field(description="唯一标识，ULID 格式")
    email: str = Field(description="邮箱，大小写不敏感唯一")
    name: str = Field(description="显示名，大小写不敏感唯一")
    role: UserRole = Field(default=UserRole.USER, description="角色")
    created_at: Timestamp = Field(description="创建时间")


class UserPatch(PatchModel):
    """User 部分更新 -- id 和 createdAt 不可修改"""

    email: str | None = None
    name: str | None = None
    role: UserRole | None = None


def _fold(value: str) -> str:
    return value.casefold()


def is_email_unique(
    users: Iterable[User],
    email: str,
    excluding_id: str | None = None,
) -> bool:
    """检查邮箱是否未被其他用户占用

    Args:
        users: 用户集合
        email: 待检查邮箱
        excluding_id: 忽略的用户 ID（更新自身资料时使用）
    """
    target = _fold(email)
    return not any(
        _fold(u.email) == target for u in users if u.id != excluding_id
    )


def is_name_unique(
    users: Iterable[User],
    name: str,
    excluding_id: str | None = None,
) -> bool:
    """检查用户名是否未被其他用户占用（大小写不敏感）"""
    target = _fold(name)
    return not any(
        _fold(u.name) == target for u in users if u.id != excluding_id
    )

"""后端存储 Protocol 接口定义

AppStore 只依赖这个接口：字符串 key -> JSON 值。
使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from typing import Any, Protocol

# JSON 兼容值（dict / list / str / int / float / bool / None）
JSONValue = Any


class KeyValueStore(Protocol):
    """持久化 key-value 存储接口

    值按 JSON 原样保存，没有额外包装，也没有 schema 版本字段。
    """

    async def get(self, key: str) -> JSONValue | None:
        """读取 key；不存在时返回 None"""
        ...

    async def set(self, key: str, value: JSONValue) -> None:
        """整体覆盖写入 key（写入完成即持久）"""
        ...

    async def close(self) -> None:
        """释放底层资源"""
        ...

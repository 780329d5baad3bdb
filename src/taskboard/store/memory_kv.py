"""KeyValueStore 内存实现

值以 JSON 文本保存，读写都经过一次序列化，
行为与 SQLite 实现一致（返回的永远是新对象）。
"""

import json

from .protocols import JSONValue


class MemoryKeyValueStore:
    """进程内 key-value 存储，进程退出后数据丢失"""

    def __init__(self, initial: dict[str, JSONValue] | None = None) -> None:
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self._data[key] = json.dumps(value, ensure_ascii=False)
        self.write_count = 0

    async def get(self, key: str) -> JSONValue | None:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: JSONValue) -> None:
        self._data[key] = json.dumps(value, ensure_ascii=False)
        self.write_count += 1

    async def keys(self) -> list[str]:
        return sorted(self._data)

    async def close(self) -> None:
        return None

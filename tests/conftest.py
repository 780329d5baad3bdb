"""全局 pytest 配置 -- 内存后端存储 + 固定时钟 + 临时 SQLite 路径"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio
from taskboard import AppStore, create_app_store
from taskboard.store import MemoryKeyValueStore

START = datetime(2026, 1, 1, 9, 0, tzinfo=UTC)


class FakeClock:
    """可手动推进的时钟"""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    """空的内存后端存储"""
    return MemoryKeyValueStore()


@pytest_asyncio.fixture
async def store(kv: MemoryKeyValueStore, clock: FakeClock) -> AsyncGenerator[AppStore, None]:
    """已加载演示数据的 AppStore"""
    app_store = await create_app_store(kv, clock=clock)
    yield app_store
    await app_store.dispose()


@pytest.fixture
def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"

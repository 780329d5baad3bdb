"""ID 生成 -- ULID 格式，时间有序且同一毫秒内也不会冲突"""

from ulid import ULID


def new_id() -> str:
    """生成新的实体 ID"""
    return str(ULID())

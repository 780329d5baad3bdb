"""演示数据 -- 首次启动时写入

两个账号（管理员 + 普通用户）、一个看板、两条任务。
"""

from collections.abc import Sequence
from datetime import datetime, timedelta

from .ids import new_id
from .models import Board, Task, TaskPriority, TaskStatus, User, UserRole

DEMO_ADMIN_EMAIL = "admin@kanban.com"
DEMO_USER_EMAIL = "user@kanban.com"


def build_demo_users(now: datetime) -> tuple[User, ...]:
    return (
        User(
            id=new_id(),
            email=DEMO_ADMIN_EMAIL,
            name="管理员",
            role=UserRole.ADMIN,
            created_at=now,
        ),
        User(
            id=new_id(),
            email=DEMO_USER_EMAIL,
            name="普通用户",
            role=UserRole.USER,
            created_at=now,
        ),
    )


def build_demo_board(created_by: str, now: datetime) -> Board:
    return Board(
        id=new_id(),
        name="主看板",
        description="用于管理任务的主看板",
        created_by=created_by,
        created_at=now,
        updated_at=now,
    )


def build_demo_tasks(
    board_id: str,
    users: Sequence[User],
    now: datetime,
) -> tuple[Task, ...]:
    """在指定看板上生成演示任务

    第一条分配给普通用户，第二条分配给管理员；找不到对应角色时留空。
    """
    admin_id = next((u.id for u in users if u.role == UserRole.ADMIN), "")
    member_id = next((u.id for u in users if u.role == UserRole.USER), "")
    return (
        Task(
            id=new_id(),
            title="设计用户界面",
            description="为新功能制作界面稿和交互原型",
            status=TaskStatus.IN_PROGRESS,
            priority=TaskPriority.HIGH,
            assignee_id=member_id,
            creator_id=admin_id,
            board_id=board_id,
            deadline=now + timedelta(days=7),
            is_pinned=True,
            created_at=now,
            updated_at=now,
        ),
        Task(
            id=new_id(),
            title="实现身份认证",
            description="搭建用户登录与注册流程",
            status=TaskStatus.CREATED,
            priority=TaskPriority.HIGH,
            assignee_id=admin_id,
            creator_id=admin_id,
            board_id=board_id,
            created_at=now,
            updated_at=now,
        ),
    )

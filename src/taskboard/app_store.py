"""AppStore -- 规范状态的唯一持有者

职责：
1. 启动时从后端存储加载数据，空集合写入演示数据，恢复会话
2. 对外提供命令接口，所有变更都转成 action 交给 reducer
3. 每个 action 之后整体重写三个集合到后端存储，再同步通知订阅者

单写者模型：所有变更操作串行执行（asyncio.Lock），
检查-执行（如 add_user 的唯一性校验）不会被其他操作插入。
多个进程共享同一后端存储时最后写入者生效，不做合并。
"""

import asyncio
import contextlib
from collections.abc import AsyncIterator, Callable, Mapping
from datetime import UTC, datetime
from typing import Any

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from . import views
from .actions import (
    Action,
    AddBoard,
    AddTask,
    AddUser,
    DeleteBoard,
    DeleteTask,
    DeleteUser,
    Login,
    Logout,
    SetBoards,
    SetCurrentBoard,
    SetTasks,
    SetUsers,
    UpdateBoard,
    UpdateTask,
    UpdateUser,
)
from .config import StoreConfig
from .exceptions import NoBoardError, StoreDisposedError
from .ids import new_id
from .models import (
    AppState,
    Board,
    BoardDraft,
    BoardPatch,
    Comment,
    Session,
    Task,
    TaskDraft,
    TaskPatch,
    User,
    UserDraft,
    UserPatch,
    UserRole,
    is_email_unique,
    is_name_unique,
)
from .reducer import reduce
from .seed import build_demo_board, build_demo_tasks, build_demo_users
from .store.protocols import KeyValueStore

log = structlog.get_logger()

Listener = Callable[[AppState, Action], None]
Clock = Callable[[], datetime]

MSG_DUPLICATE_EMAIL = "该邮箱已被其他用户使用"
MSG_DUPLICATE_NAME = "该用户名已被其他用户使用"
MSG_USER_CREATED = "用户创建成功"
MSG_USER_UPDATED = "用户资料已更新"
MSG_USER_NOT_FOUND = "用户不存在"

_USERS = TypeAdapter(list[User])
_TASKS = TypeAdapter(list[Task])
_BOARDS = TypeAdapter(list[Board])


class OperationResult(BaseModel):
    """需要向调用方说明原因的操作结果"""

    success: bool
    message: str
    user_id: str | None = None


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _as_id(raw: Any) -> str | None:
    # 会话指针只接受非空字符串，其余一律视为未记录
    return raw if isinstance(raw, str) and raw else None


class AppStore:
    """应用状态存储

    通过 create_app_store() 创建（会完成加载），用完调用 dispose()。
    读取接口返回的都是深拷贝，修改返回值不会影响规范状态。
    """

    def __init__(
        self,
        kv: KeyValueStore,
        config: StoreConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._kv = kv
        self._config = config or StoreConfig()
        self._clock = clock or _utc_now
        self._state = AppState()
        self._listeners: list[Listener] = []
        self._lock = asyncio.Lock()
        self._disposed = False

    # ------------------------------------------------------------------
    # 读取（快照）
    # ------------------------------------------------------------------

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def state(self) -> AppState:
        return self._state.model_copy(deep=True)

    @property
    def users(self) -> list[User]:
        return [u.model_copy(deep=True) for u in self._state.users]

    @property
    def tasks(self) -> list[Task]:
        return [t.model_copy(deep=True) for t in self._state.tasks]

    @property
    def boards(self) -> list[Board]:
        return [b.model_copy(deep=True) for b in self._state.boards]

    @property
    def session(self) -> Session:
        return self._state.session.model_copy(deep=True)

    @property
    def current_user(self) -> User | None:
        return self.session.current_user

    @property
    def current_board_id(self) -> str | None:
        return self._state.session.current_board_id

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def get_user(self, user_id: str) -> User | None:
        user = self._find_user(user_id)
        return user.model_copy(deep=True) if user else None

    def get_task(self, task_id: str) -> Task | None:
        task = self._find_task(task_id)
        return task.model_copy(deep=True) if task else None

    def get_board(self, board_id: str) -> Board | None:
        board = next((b for b in self._state.boards if b.id == board_id), None)
        return board.model_copy(deep=True) if board else None

    def get_current_board_tasks(self) -> list[Task]:
        """当前看板的任务（每次调用重新计算）"""
        return [
            t.model_copy(deep=True)
            for t in views.board_tasks(self._state.tasks, self.current_board_id)
        ]

    def report(self, now: datetime | None = None) -> views.BoardReport:
        """当前看板的统计汇总"""
        return views.build_board_report(
            self._state.users,
            views.board_tasks(self._state.tasks, self.current_board_id),
            now or self._clock(),
        )

    # ------------------------------------------------------------------
    # 订阅
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """注册状态变更监听器

        每个 action 提交（并持久化）后按注册顺序同步调用
        listener(state_snapshot, action)。

        Returns:
            取消订阅函数，重复调用是安全的
        """
        self._ensure_open("subscribe")
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # 会话
    # ------------------------------------------------------------------

    async def login(self, email: str) -> bool:
        """按邮箱（精确匹配）登录

        不校验任何凭据，只要存在该邮箱的用户即登录成功。
        """
        async with self._writing("login"):
            user = next((u for u in self._state.users if u.email == email), None)
            if user is None:
                log.info("login_rejected", reason="unknown_email")
                return False
            await self._dispatch(Login(user=user))
            await self._kv.set(self._config.current_user_key, user.id)
            log.info("user_logged_in", user_id=user.id)
            return True

    async def register(self, email: str, name: str) -> bool:
        """注册普通用户并直接登录

        邮箱或用户名已存在（大小写不敏感）时返回 False，状态不变。
        """
        async with self._writing("register"):
            users = self._state.users
            if not is_email_unique(users, email) or not is_name_unique(users, name):
                log.info("register_rejected", reason="duplicate_identity")
                return False
            user = User(
                id=new_id(),
                email=email,
                name=name,
                role=UserRole.USER,
                created_at=self._clock(),
            )
            await self._dispatch(AddUser(user=user))
            await self._dispatch(Login(user=user))
            await self._kv.set(self._config.current_user_key, user.id)
            log.info("user_registered", user_id=user.id)
            return True

    async def logout(self) -> None:
        async with self._writing("logout"):
            await self._dispatch(Logout())
            await self._kv.set(self._config.current_user_key, None)

    # ------------------------------------------------------------------
    # 用户
    # ------------------------------------------------------------------

    async def add_user(self, data: UserDraft | Mapping[str, Any]) -> OperationResult:
        """添加用户（管理员操作）

        邮箱和用户名都通过校验后才会写入，任何一项冲突都不产生部分结果。
        """
        self._ensure_open("add_user")
        draft = data if isinstance(data, UserDraft) else UserDraft.model_validate(data)
        async with self._writing("add_user"):
            users = self._state.users
            if not is_email_unique(users, draft.email):
                log.info("user_rejected", reason="duplicate_email")
                return OperationResult(success=False, message=MSG_DUPLICATE_EMAIL)
            if not is_name_unique(users, draft.name):
                log.info("user_rejected", reason="duplicate_name")
                return OperationResult(success=False, message=MSG_DUPLICATE_NAME)

            user = User(
                id=new_id(),
                email=draft.email,
                name=draft.name,
                role=draft.role,
                created_at=self._clock(),
            )
            await self._dispatch(AddUser(user=user))
            log.info("user_added", user_id=user.id, role=user.role.value)
            return OperationResult(success=True, message=MSG_USER_CREATED, user_id=user.id)

    async def update_user(
        self,
        user_id: str,
        updates: UserPatch | Mapping[str, Any],
    ) -> OperationResult:
        """更新用户资料；新的邮箱/用户名不能与其他用户冲突

        用户不存在时返回失败结果，不产生任何 action。
        """
        self._ensure_open("update_user")
        patch = updates if isinstance(updates, UserPatch) else UserPatch.model_validate(updates)
        async with self._writing("update_user"):
            users = self._state.users
            if self._find_user(user_id) is None:
                return OperationResult(success=False, message=MSG_USER_NOT_FOUND)
            if patch.email is not None and not is_email_unique(
                users, patch.email, excluding_id=user_id
            ):
                return OperationResult(success=False, message=MSG_DUPLICATE_EMAIL)
            if patch.name is not None and not is_name_unique(
                users, patch.name, excluding_id=user_id
            ):
                return OperationResult(success=False, message=MSG_DUPLICATE_NAME)
            await self._dispatch(UpdateUser(user_id=user_id, patch=patch))
            return OperationResult(success=True, message=MSG_USER_UPDATED, user_id=user_id)

    async def delete_user(self, user_id: str) -> None:
        """删除用户；不存在时 no-op

        不阻止删除当前登录用户，这一限制由调用方负责。
        """
        async with self._writing("delete_user"):
            await self._dispatch(DeleteUser(user_id=user_id))

    # ------------------------------------------------------------------
    # 任务
    # ------------------------------------------------------------------

    async def add_task(self, data: TaskDraft | Mapping[str, Any]) -> Task:
        """新建任务：生成 id 和时间戳，board_id 缺省为当前看板

        Raises:
            NoBoardError: 没有指定看板且不存在任何可用看板
        """
        self._ensure_open("add_task")
        draft = data if isinstance(data, TaskDraft) else TaskDraft.model_validate(data)
        async with self._writing("add_task"):
            board_id = draft.board_id or self.current_board_id
            if board_id is None and self._state.boards:
                board_id = self._state.boards[0].id
            if board_id is None:
                raise NoBoardError()

            now = self._clock()
            current = self._state.session.current_user
            task = Task(
                id=new_id(),
                title=draft.title,
                description=draft.description,
                status=draft.status,
                priority=draft.priority,
                assignee_id=draft.assignee_id,
                creator_id=draft.creator_id or (current.id if current else ""),
                board_id=board_id,
                deadline=draft.deadline,
                is_pinned=draft.is_pinned,
                attachments=list(draft.attachments),
                comments=list(draft.comments),
                created_at=now,
                updated_at=now,
            )
            await self._dispatch(AddTask(task=task))
            return task.model_copy(deep=True)

    async def update_task(
        self,
        task_id: str,
        updates: TaskPatch | Mapping[str, Any],
    ) -> None:
        """合并部分字段；id 和 createdAt 即使传入也不会被修改"""
        self._ensure_open("update_task")
        patch = updates if isinstance(updates, TaskPatch) else TaskPatch.model_validate(updates)
        async with self._writing("update_task"):
            await self._dispatch(UpdateTask(task_id=task_id, patch=patch, at=self._clock()))

    async def delete_task(self, task_id: str) -> None:
        async with self._writing("delete_task"):
            await self._dispatch(DeleteTask(task_id=task_id))

    async def toggle_task_pin(self, task_id: str) -> None:
        """切换置顶状态；任务不存在时 no-op"""
        async with self._writing("toggle_task_pin"):
            task = self._find_task(task_id)
            if task is None:
                return
            await self._dispatch(
                UpdateTask(
                    task_id=task_id,
                    patch=TaskPatch(is_pinned=not task.is_pinned),
                    at=self._clock(),
                )
            )

    async def add_comment(self, task_id: str, user_id: str, content: str) -> Comment | None:
        """在任务末尾追加一条评论

        Returns:
            新评论；内容为空或任务不存在时返回 None
        """
        self._ensure_open("add_comment")
        if not content.strip():
            return None
        async with self._writing("add_comment"):
            if self._find_task(task_id) is None:
                return None
            now = self._clock()
            comment = Comment(id=new_id(), user_id=user_id, content=content, created_at=now)
            await self._dispatch(
                UpdateTask(task_id=task_id, append_comments=(comment,), at=now)
            )
            return comment

    # ------------------------------------------------------------------
    # 看板
    # ------------------------------------------------------------------

    async def add_board(self, data: BoardDraft | Mapping[str, Any]) -> Board:
        self._ensure_open("add_board")
        draft = data if isinstance(data, BoardDraft) else BoardDraft.model_validate(data)
        async with self._writing("add_board"):
            now = self._clock()
            current = self._state.session.current_user
            board = Board(
                id=new_id(),
                name=draft.name,
                description=draft.description,
                created_by=draft.created_by or (current.id if current else ""),
                created_at=now,
                updated_at=now,
            )
            await self._dispatch(AddBoard(board=board))
            return board.model_copy(deep=True)

    async def update_board(
        self,
        board_id: str,
        updates: BoardPatch | Mapping[str, Any],
    ) -> None:
        self._ensure_open("update_board")
        patch = updates if isinstance(updates, BoardPatch) else BoardPatch.model_validate(updates)
        async with self._writing("update_board"):
            await self._dispatch(UpdateBoard(board_id=board_id, patch=patch, at=self._clock()))

    async def delete_board(self, board_id: str) -> None:
        """删除看板；看板上的任务保留（不级联删除）"""
        async with self._writing("delete_board"):
            await self._dispatch(DeleteBoard(board_id=board_id))

    async def set_current_board(self, board_id: str) -> None:
        async with self._writing("set_current_board"):
            await self._dispatch(SetCurrentBoard(board_id=board_id))

    # ------------------------------------------------------------------
    # 生命周期
    # ------------------------------------------------------------------

    async def hydrate(self) -> None:
        """从后端存储加载状态（启动时执行一次）

        流程：
        1. 读取三个集合和两个会话指针，格式错误按空集合处理
        2. 用户为空：写入演示账号
        3. 看板为空：写入演示看板；当前看板未记录（或已失效）时选第一个看板
        4. 任务为空：在当前看板上写入演示任务
        5. 恢复登录用户；未记录或已失效时自动登录第一个管理员
        """
        async with self._writing("hydrate"):
            cfg = self._config
            seed = cfg.seed_demo_data
            now = self._clock()

            users = await self._load(cfg.users_key, _USERS)
            tasks = await self._load(cfg.tasks_key, _TASKS)
            boards = await self._load(cfg.boards_key, _BOARDS)
            current_user_id = _as_id(await self._kv.get(cfg.current_user_key))
            current_board_id = _as_id(await self._kv.get(cfg.current_board_key))

            if not users and seed:
                users = build_demo_users(now)
                await self._write_collection(cfg.users_key, users)
                log.info("demo_data_seeded", collection="users", count=len(users))
            self._apply(SetUsers(users=users))

            if not boards and seed:
                creator = next((u for u in users if u.role == UserRole.ADMIN), None)
                boards = (build_demo_board(creator.id if creator else "", now),)
                await self._write_collection(cfg.boards_key, boards)
                log.info("demo_data_seeded", collection="boards", count=len(boards))
            if boards and not any(b.id == current_board_id for b in boards):
                current_board_id = boards[0].id
                await self._kv.set(cfg.current_board_key, current_board_id)
            self._apply(SetBoards(boards=boards))
            if current_board_id is not None:
                self._apply(SetCurrentBoard(board_id=current_board_id))

            if not tasks and seed and current_board_id is not None:
                tasks = build_demo_tasks(current_board_id, users, now)
                await self._write_collection(cfg.tasks_key, tasks)
                log.info("demo_data_seeded", collection="tasks", count=len(tasks))
            self._apply(SetTasks(tasks=tasks))

            user = self._find_user(current_user_id) if current_user_id else None
            if user is None:
                user = next((u for u in users if u.role == UserRole.ADMIN), None)
                if user is not None:
                    await self._kv.set(cfg.current_user_key, user.id)
                    log.info("auto_login_admin", user_id=user.id)
            if user is not None:
                self._apply(Login(user=user))

            log.info(
                "store_hydrated",
                users=len(self._state.users),
                tasks=len(self._state.tasks),
                boards=len(self._state.boards),
                current_board_id=self.current_board_id,
                authenticated=self._state.session.is_authenticated,
            )

    async def dispose(self) -> None:
        """释放：清空订阅者，之后的变更操作和订阅都抛出 StoreDisposedError

        读取接口仍返回释放时的最后状态。

        后端存储由创建者负责关闭。重复调用是安全的。
        """
        async with self._lock:
            if self._disposed:
                return
            self._listeners.clear()
            self._disposed = True
            log.info("store_disposed")

    # ------------------------------------------------------------------
    # 内部实现
    # ------------------------------------------------------------------

    def _ensure_open(self, operation: str) -> None:
        if self._disposed:
            raise StoreDisposedError(operation)

    @contextlib.asynccontextmanager
    async def _writing(self, operation: str) -> AsyncIterator[None]:
        """串行执行一个变更操作；拿到锁后再检查一次是否已释放"""
        async with self._lock:
            self._ensure_open(operation)
            yield

    def _find_user(self, user_id: str) -> User | None:
        return next((u for u in self._state.users if u.id == user_id), None)

    def _find_task(self, task_id: str) -> Task | None:
        return next((t for t in self._state.tasks if t.id == task_id), None)

    def _apply(self, action: Action) -> None:
        """只应用到内存状态，不持久化、不通知（加载阶段使用）"""
        self._state = reduce(self._state, action)

    async def _dispatch(self, action: Action) -> None:
        """应用 action -> 整体重写后端存储 -> 同步通知订阅者"""
        self._ensure_open(action.kind)
        previous = self._state
        self._state = reduce(previous, action)
        log.debug(
            "action_dispatched",
            kind=action.kind,
            changed=self._state is not previous,
        )
        await self._persist()

        if self._listeners:
            snapshot = self._state.model_copy(deep=True)
            for listener in list(self._listeners):
                listener(snapshot, action)

    async def _persist(self) -> None:
        cfg = self._config
        state = self._state
        await self._write_collection(cfg.users_key, state.users)
        await self._write_collection(cfg.tasks_key, state.tasks)
        await self._write_collection(cfg.boards_key, state.boards)
        if state.session.current_board_id is not None:
            await self._kv.set(cfg.current_board_key, state.session.current_board_id)

    async def _write_collection(
        self,
        key: str,
        items: tuple[User, ...] | tuple[Task, ...] | tuple[Board, ...],
    ) -> None:
        await self._kv.set(key, [item.to_json_dict() for item in items])

    async def _load(self, key: str, adapter: TypeAdapter) -> tuple:
        raw = await self._kv.get(key)
        if raw is None:
            return ()
        try:
            return tuple(adapter.validate_python(raw))
        except ValidationError as exc:
            log.warning(
                "hydration_collection_malformed",
                key=key,
                error_count=exc.error_count(),
            )
            return ()


async def create_app_store(
    kv: KeyValueStore,
    config: StoreConfig | None = None,
    clock: Clock | None = None,
) -> AppStore:
    """创建 AppStore 并完成加载

    Args:
        kv: 后端 key-value 存储（调用方负责关闭）
        config: 配置，缺省使用默认值
        clock: 返回当前 UTC 时间的函数（测试注入固定时钟）

    Returns:
        已加载的 AppStore 实例
    """
    store = AppStore(kv, config=config, clock=clock)
    await store.hydrate()
    return store

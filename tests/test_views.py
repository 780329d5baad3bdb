"""派生视图测试"""

from datetime import UTC, date, datetime, timedelta

import pytest
from taskboard import views
from taskboard.models import Task, TaskPriority, TaskStatus, User, UserRole

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def _task(task_id: str, **kwargs) -> Task:
    fields = {
        "id": task_id,
        "title": f"task {task_id}",
        "board_id": "B1",
        "created_at": NOW - timedelta(days=30),
        "updated_at": NOW - timedelta(days=30),
    }
    fields.update(kwargs)
    return Task(**fields)


class TestCounts:
    def test_status_counts_has_every_status(self):
        counts = views.status_counts([_task("T1", status=TaskStatus.COMPLETED)])
        assert counts == {
            TaskStatus.CREATED: 0,
            TaskStatus.IN_PROGRESS: 0,
            TaskStatus.COMPLETED: 1,
        }

    def test_priority_counts(self):
        tasks = [
            _task("T1", priority=TaskPriority.HIGH),
            _task("T2", priority=TaskPriority.HIGH),
            _task("T3", priority=TaskPriority.LOW),
        ]
        counts = views.priority_counts(tasks)
        assert counts[TaskPriority.HIGH] == 2
        assert counts[TaskPriority.MEDIUM] == 0
        assert counts[TaskPriority.LOW] == 1


class TestCompletionRate:
    """完成率：四舍五入的整数百分比"""

    def test_empty_is_zero(self):
        assert views.completion_rate([]) == 0

    @pytest.mark.parametrize(
        ("completed", "total", "expected"),
        [
            (1, 2, 50),
            (1, 3, 33),
            (2, 3, 67),
            (1, 8, 13),  # 12.5 向上取整
            (3, 3, 100),
        ],
    )
    def test_rounding(self, completed, total, expected):
        tasks = [
            _task(f"T{i}", status=TaskStatus.COMPLETED if i < completed else TaskStatus.CREATED)
            for i in range(total)
        ]
        assert views.completion_rate(tasks) == expected


class TestDeadlines:
    def test_overdue_requires_incomplete(self):
        late = _task("T1", deadline=NOW - timedelta(hours=1))
        done = _task("T2", deadline=NOW - timedelta(hours=1), status=TaskStatus.COMPLETED)
        assert views.is_overdue(late, NOW) is True
        assert views.is_overdue(done, NOW) is False
        assert views.overdue_tasks([late, done], NOW) == [late]

    def test_no_deadline_never_overdue(self):
        assert views.is_overdue(_task("T1"), NOW) is False
        assert views.is_due_soon(_task("T1"), NOW) is False

    def test_due_soon_window(self):
        inside = _task("T1", deadline=NOW + timedelta(days=1))
        outside = _task("T2", deadline=NOW + timedelta(days=3))
        past = _task("T3", deadline=NOW - timedelta(minutes=1))
        assert views.due_soon_tasks([inside, outside, past], NOW) == [inside]

    def test_due_soon_custom_window(self):
        task = _task("T1", deadline=NOW + timedelta(days=3))
        assert views.is_due_soon(task, NOW, window=timedelta(days=5)) is True

    def test_tasks_for_day(self):
        morning = _task("T1", deadline=datetime(2026, 3, 12, 8, 0, tzinfo=UTC))
        evening = _task("T2", deadline=datetime(2026, 3, 12, 23, 0, tzinfo=UTC))
        other = _task("T3", deadline=datetime(2026, 3, 13, 0, 0, tzinfo=UTC))
        tasks = [morning, other, evening, _task("T4")]
        assert views.tasks_for_day(tasks, date(2026, 3, 12)) == [morning, evening]


class TestRecent:
    def test_recent_window(self):
        new = _task("T1", created_at=NOW - timedelta(days=2))
        old = _task("T2", created_at=NOW - timedelta(days=8))
        assert views.recent_tasks([new, old], NOW) == [new]


class TestNaiveNow:
    """无时区的 now 按 UTC 处理"""

    def test_window_views_accept_naive_now(self):
        naive_now = NOW.replace(tzinfo=None)
        late = _task("T1", deadline=NOW - timedelta(hours=1))
        soon = _task("T2", deadline=NOW + timedelta(hours=1))
        new = _task("T3", created_at=NOW - timedelta(days=1))
        tasks = [late, soon, new]

        assert views.overdue_tasks(tasks, naive_now) == [late]
        assert views.due_soon_tasks(tasks, naive_now) == [soon]
        assert views.recent_tasks(tasks, naive_now) == [new]

    def test_report_with_naive_now(self):
        tasks = [_task("T1", deadline=datetime(2026, 1, 1))]
        report = views.build_board_report([], tasks, datetime(2026, 1, 2))
        assert report.overdue == 1
        assert report.due_soon == 0


class TestOrdering:
    def test_board_tasks_keeps_order(self):
        tasks = [_task("T1"), _task("T2", board_id="B2"), _task("T3")]
        assert [t.id for t in views.board_tasks(tasks, "B1")] == ["T1", "T3"]
        assert views.board_tasks(tasks, None) == []

    def test_pinned_first_is_stable(self):
        tasks = [
            _task("T1"),
            _task("T2", is_pinned=True),
            _task("T3"),
            _task("T4", is_pinned=True),
        ]
        assert [t.id for t in views.pinned_first(tasks)] == ["T2", "T4", "T1", "T3"]

    def test_tasks_by_status_columns(self):
        tasks = [
            _task("T1", status=TaskStatus.COMPLETED),
            _task("T2"),
            _task("T3", is_pinned=True),
        ]
        columns = views.tasks_by_status(tasks)
        assert list(columns) == [TaskStatus.CREATED, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED]
        assert [t.id for t in columns[TaskStatus.CREATED]] == ["T3", "T2"]
        assert columns[TaskStatus.IN_PROGRESS] == []


class TestReports:
    @pytest.fixture
    def users(self) -> list[User]:
        return [
            User(id="U1", email="a@x.com", name="Ann", role=UserRole.ADMIN, created_at=NOW),
            User(id="U2", email="b@x.com", name="Bob", created_at=NOW),
        ]

    def test_user_task_stats(self, users):
        tasks = [
            _task("T1", assignee_id="U1", status=TaskStatus.COMPLETED),
            _task("T2", assignee_id="U1", status=TaskStatus.IN_PROGRESS),
            _task("T3", assignee_id="U1"),
            _task("T4"),
        ]
        ann, bob = views.user_task_stats(users, tasks)
        assert (ann.total, ann.created, ann.in_progress, ann.completed) == (3, 1, 1, 1)
        assert ann.completion_rate == 33
        assert bob.total == 0
        assert bob.completion_rate == 0

    def test_build_board_report(self, users):
        tasks = [
            _task("T1", status=TaskStatus.COMPLETED, assignee_id="U2"),
            _task("T2", deadline=NOW - timedelta(days=1), priority=TaskPriority.HIGH),
            _task("T3", deadline=NOW + timedelta(hours=5), created_at=NOW - timedelta(days=1)),
        ]
        report = views.build_board_report(users, tasks, NOW)

        assert report.total == 3
        assert report.completion_rate == 33
        assert report.overdue == 1
        assert report.due_soon == 1
        assert report.recent == 1
        assert report.by_status[TaskStatus.CREATED] == 2
        assert report.by_priority[TaskPriority.HIGH] == 1
        assert [s.user_id for s in report.users] == ["U1", "U2"]

    async def test_store_report_scoped_to_current_board(self, store, clock):
        await store.add_board({"name": "Side"})
        report = store.report()
        assert report.total == 2
        assert report.by_status[TaskStatus.IN_PROGRESS] == 1
        assert report.recent == 2
        # 演示任务 7 天后截止，不在临近窗口内
        assert report.due_soon == 0
        clock.advance(days=6)
        assert store.report().due_soon == 1

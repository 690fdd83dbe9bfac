"""Tests for the deferred task dispatcher."""

from unittest.mock import Mock

from contentforge.core.tasks import Continue, Done, InMemoryDispatcher, drive


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class TestInMemoryDispatcher:
    """Tests for InMemoryDispatcher."""

    def setup_method(self):
        self.clock = FakeClock()
        self.dispatcher = InMemoryDispatcher(clock=self.clock)

    def test_runs_due_tasks_in_order(self):
        calls = []
        self.dispatcher.on_task("hook", calls.append)

        self.dispatcher.schedule_once(1005, "hook", "later")
        self.dispatcher.schedule_once(1000, "hook", "first")
        self.dispatcher.schedule_once(1000, "hook", "second")

        assert self.dispatcher.run_due() == 2
        assert calls == ["first", "second"]

        self.clock.now = 1005
        assert self.dispatcher.run_due() == 1
        assert calls == ["first", "second", "later"]

    def test_run_due_max_tasks(self):
        calls = []
        self.dispatcher.on_task("hook", calls.append)
        for i in range(3):
            self.dispatcher.schedule_once(1000, "hook", i)

        assert self.dispatcher.run_due(max_tasks=2) == 2
        assert calls == [0, 1]
        assert len(self.dispatcher.pending()) == 1

    def test_unique_refuses_identical_pending_task(self):
        first = self.dispatcher.schedule_once(1000, "hook", {"a": 1, "b": 2}, unique=True)
        second = self.dispatcher.schedule_once(1000, "hook", {"b": 2, "a": 1}, unique=True)
        other = self.dispatcher.schedule_once(1000, "hook", {"a": 2}, unique=True)

        assert first is not None
        assert second is None
        assert other is not None

    def test_non_unique_allows_duplicates(self):
        self.dispatcher.schedule_once(1000, "hook", {"a": 1})
        assert self.dispatcher.schedule_once(1000, "hook", {"a": 1}) is not None
        assert len(self.dispatcher.pending("hook")) == 2

    def test_pending_filters(self):
        self.dispatcher.schedule_once(1000, "one", 1, group="g1")
        self.dispatcher.schedule_once(1000, "two", 2, group="g2")

        assert [t.payload for t in self.dispatcher.pending(hook="one")] == [1]
        assert [t.payload for t in self.dispatcher.pending(group="g2")] == [2]
        assert self.dispatcher.pending(hook="one", group="g2") == []

    def test_callbacks_can_schedule_more_work(self):
        calls = []

        def handler(n):
            calls.append(n)
            if n < 3:
                self.dispatcher.schedule_once(self.clock() + 5, "count", n + 1)

        self.dispatcher.on_task("count", handler)
        self.dispatcher.schedule_once(1000, "count", 1)

        assert self.dispatcher.run_due() == 1
        assert self.dispatcher.run_until_idle() == 2
        assert calls == [1, 2, 3]

    def test_handler_exception_is_contained(self):
        self.dispatcher.on_task("bad", Mock(side_effect=RuntimeError("boom")))
        good = Mock()
        self.dispatcher.on_task("good", good)

        self.dispatcher.schedule_once(1000, "bad", None)
        self.dispatcher.schedule_once(1000, "good", "payload")

        assert self.dispatcher.run_due() == 2
        good.assert_called_once_with("payload")

    def test_unknown_hook_dropped(self):
        self.dispatcher.schedule_once(1000, "nobody", None)

        assert self.dispatcher.run_until_idle() == 1
        assert self.dispatcher.pending() == []

    def test_snapshot_restore(self):
        self.dispatcher.schedule_once(1010, "hook", {"n": 2}, group="g")
        self.dispatcher.schedule_once(1000, "hook", {"n": 1})

        restored = InMemoryDispatcher(clock=self.clock)
        restored.restore(self.dispatcher.snapshot())

        tasks = restored.pending()
        assert [t.payload for t in tasks] == [{"n": 1}, {"n": 2}]
        assert tasks[1].group == "g"
        assert tasks[0].task_id == self.dispatcher.pending()[0].task_id


class TestDrive:
    """Tests for continuation interpretation."""

    def test_continue_schedules_payload(self):
        dispatcher = InMemoryDispatcher(clock=FakeClock())

        task_id, done = drive(Continue({"i": 1}, delay=5), dispatcher, "hook", now=1000, group="g")

        assert done is None
        task = dispatcher.pending()[0]
        assert task.task_id == task_id
        assert task.run_at == 1005
        assert task.group == "g"

    def test_done_is_returned(self):
        dispatcher = InMemoryDispatcher(clock=FakeClock())

        task_id, done = drive(Done("completed"), dispatcher, "hook", now=1000)

        assert task_id is None
        assert done == Done("completed")
        assert dispatcher.pending() == []

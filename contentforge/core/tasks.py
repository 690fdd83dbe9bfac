"""Deferred task dispatching.

Batch generation is a chain of one-shot tasks rather than a loop: each unit of
work returns a continuation telling the driver whether to schedule the next
unit. The dispatcher itself is a host collaborator; :class:`InMemoryDispatcher`
is the in-process implementation used by the CLI and tests.
"""

import heapq
import itertools
import json
import threading
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..utils import get_logger


logger = get_logger(__name__)


TaskCallback = Callable[[Any], Any]


@dataclass
class Continue:
    """Schedule ``payload`` to run again after ``delay`` seconds."""

    payload: Any
    delay: float = 0.0


@dataclass
class Done:
    """The chain ends here.

    Attributes:
        status: Why the chain ended ("completed", "failed", "missing", ...)
    """

    status: str


Continuation = Any  # Continue | Done


@dataclass(order=True)
class ScheduledTask:
    """A task waiting in the queue."""

    run_at: float
    sequence: int
    task_id: str = field(compare=False)
    hook: str = field(compare=False)
    payload: Any = field(compare=False)
    group: Optional[str] = field(default=None, compare=False)


class TaskDispatcher(ABC):
    """Schedules one-shot tasks and routes them to registered callbacks."""

    @abstractmethod
    def schedule_once(
        self,
        run_at: float,
        hook: str,
        payload: Any,
        group: Optional[str] = None,
        unique: bool = False,
    ) -> Optional[str]:
        """Schedule a single task.

        Args:
            run_at: Unix time at which the task becomes due
            hook: Name of the handler to invoke
            payload: JSON-serializable argument passed to the handler
            group: Optional group label (one group per batch)
            unique: Refuse if an identical task is already pending

        Returns:
            Task id, or None if the task was refused
        """
        pass

    @abstractmethod
    def on_task(self, hook: str, callback: TaskCallback) -> None:
        """Register the callback invoked for tasks scheduled on hook."""
        pass


class InMemoryDispatcher(TaskDispatcher):
    """Priority-queue dispatcher running tasks in-process.

    Tasks run in ``run_at`` order, ties broken by scheduling order. Callbacks
    may schedule further tasks while running.

    Example:
        >>> dispatcher = InMemoryDispatcher()
        >>> dispatcher.on_task("hello", print)
        >>> task_id = dispatcher.schedule_once(time.time(), "hello", {"name": "world"})
        >>> dispatcher.run_due()
        {'name': 'world'}
        1
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        """Initialize dispatcher.

        Args:
            clock: Source of the current Unix time
        """
        self.clock = clock
        self._queue: List[ScheduledTask] = []
        self._handlers: Dict[str, TaskCallback] = {}
        self._sequence = itertools.count()
        self._lock = threading.RLock()

    def on_task(self, hook: str, callback: TaskCallback) -> None:
        with self._lock:
            self._handlers[hook] = callback

    def schedule_once(
        self,
        run_at: float,
        hook: str,
        payload: Any,
        group: Optional[str] = None,
        unique: bool = False,
    ) -> Optional[str]:
        with self._lock:
            if unique and self._find(hook, payload) is not None:
                logger.debug(f"Refusing duplicate task for hook {hook}")
                return None

            task = ScheduledTask(
                run_at=run_at,
                sequence=next(self._sequence),
                task_id=f"task-{uuid.uuid4().hex[:12]}",
                hook=hook,
                payload=payload,
                group=group,
            )
            heapq.heappush(self._queue, task)

        logger.debug(f"Scheduled {task.task_id} on {hook} at {run_at:.0f}")
        return task.task_id

    def pending(self, hook: Optional[str] = None, group: Optional[str] = None) -> List[ScheduledTask]:
        """Pending tasks in run order, optionally filtered."""
        with self._lock:
            tasks = sorted(self._queue)
        return [
            t for t in tasks
            if (hook is None or t.hook == hook) and (group is None or t.group == group)
        ]

    def snapshot(self) -> List[Dict[str, Any]]:
        """Pending tasks as JSON-serializable dicts, in run order."""
        return [
            {
                "run_at": t.run_at,
                "task_id": t.task_id,
                "hook": t.hook,
                "payload": t.payload,
                "group": t.group,
            }
            for t in self.pending()
        ]

    def restore(self, tasks: List[Dict[str, Any]]) -> None:
        """Re-queue tasks produced by :meth:`snapshot`."""
        with self._lock:
            for data in tasks:
                heapq.heappush(self._queue, ScheduledTask(
                    run_at=float(data["run_at"]),
                    sequence=next(self._sequence),
                    task_id=data["task_id"],
                    hook=data["hook"],
                    payload=data["payload"],
                    group=data.get("group"),
                ))

    def run_due(self, now: Optional[float] = None, max_tasks: Optional[int] = None) -> int:
        """Run every task due at ``now``.

        Tasks scheduled by callbacks are run in the same call when they are
        already due.

        Args:
            now: Point in time to run against (defaults to the clock)
            max_tasks: Stop after this many tasks

        Returns:
            Number of tasks run
        """
        ran = 0
        while max_tasks is None or ran < max_tasks:
            current = self.clock() if now is None else now
            task = self._pop(lambda t: t.run_at <= current)
            if task is None:
                return ran
            self._run(task)
            ran += 1
        return ran

    def run_until_idle(self, max_tasks: Optional[int] = None) -> int:
        """Run queued tasks in order, ignoring their due time.

        Args:
            max_tasks: Stop after this many tasks (None runs until the queue
                is empty)

        Returns:
            Number of tasks run
        """
        ran = 0
        while max_tasks is None or ran < max_tasks:
            task = self._pop(lambda t: True)
            if task is None:
                break
            self._run(task)
            ran += 1
        return ran

    def _pop(self, is_ready: Callable[[ScheduledTask], bool]) -> Optional[ScheduledTask]:
        with self._lock:
            if self._queue and is_ready(self._queue[0]):
                return heapq.heappop(self._queue)
            return None

    def _find(self, hook: str, payload: Any) -> Optional[ScheduledTask]:
        key = _payload_key(payload)
        for task in self._queue:
            if task.hook == hook and _payload_key(task.payload) == key:
                return task
        return None

    def _run(self, task: ScheduledTask) -> None:
        callback = self._handlers.get(task.hook)
        if callback is None:
            logger.warning(f"No handler registered for hook {task.hook}, dropping {task.task_id}")
            return

        try:
            callback(task.payload)
        except Exception as e:
            logger.error(f"Task {task.task_id} on {task.hook} failed: {e}", exc_info=True)


def _payload_key(payload: Any) -> str:
    return json.dumps(payload, sort_keys=True, default=str)


def drive(
    continuation: Continuation,
    dispatcher: TaskDispatcher,
    hook: str,
    now: float,
    group: Optional[str] = None,
) -> Tuple[Optional[str], Optional[Done]]:
    """Interpret a continuation returned by a unit of work.

    ``Continue`` schedules its payload on ``hook`` after the requested delay;
    ``Done`` is handed back so the caller can finish the chain.

    Returns:
        (task id of the scheduled continuation, Done or None)
    """
    if isinstance(continuation, Continue):
        task_id = dispatcher.schedule_once(now + continuation.delay, hook, continuation.payload, group=group)
        return task_id, None
    return None, continuation

"""
Cancellable Delayed Tasks

Deferred callbacks used for the disconnect grace period and the typing
indicator expiry. Each room keeps its own TimerRegistry keyed by
(nickname, purpose); arming a key always replaces the previous task.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

TimerCallback = Callable[[], Union[None, Awaitable[None]]]
TimerKey = Tuple[str, str]


class DelayedTask:
    """
    Run a callback once after a delay unless cancelled first.

    Attributes:
        delay: Seconds to wait before running the callback
        name: Label used in log messages
    """

    def __init__(
        self,
        delay: float,
        callback: TimerCallback,
        name: str = "delayed-task",
        on_fire: Optional[Callable[["DelayedTask"], None]] = None,
    ):
        """
        Initialize the delayed task.

        Args:
            delay: Seconds to wait
            callback: Sync function or coroutine function to run
            name: Label used in log messages
            on_fire: Hook called right before the callback runs
        """
        self.delay = delay
        self.name = name
        self._callback = callback
        self._on_fire = on_fire
        self._task: Optional[asyncio.Task] = None
        self._fired = False

    def start(self) -> "DelayedTask":
        """Schedule the task on the running event loop."""
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._run())
        return self

    async def _run(self):
        await asyncio.sleep(self.delay)
        self._fired = True
        if self._on_fire:
            self._on_fire(self)
        try:
            result = self._callback()
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(f"Timer '{self.name}' callback failed")

    def cancel(self) -> bool:
        """
        Cancel the task if it has not fired yet.

        Returns:
            True if a pending task was cancelled
        """
        if self._task is None or self._fired or self._task.done():
            return False
        self._task.cancel()
        return True

    @property
    def pending(self) -> bool:
        """Whether the task is scheduled and has not fired."""
        return self._task is not None and not self._fired and not self._task.done()

    @property
    def fired(self) -> bool:
        return self._fired


class TimerRegistry:
    """
    Keyed store of DelayedTasks.

    A task removes its own key right before its callback runs, so a key is
    present exactly while its task is pending.
    """

    def __init__(self):
        self._tasks: Dict[TimerKey, DelayedTask] = {}

    def arm(
        self, nickname: str, purpose: str, delay: float, callback: TimerCallback
    ) -> DelayedTask:
        """
        Schedule a callback, replacing any pending task for the same key.

        Returns:
            The newly started DelayedTask
        """
        key = (nickname, purpose)
        self.cancel(nickname, purpose)
        task = DelayedTask(
            delay,
            callback,
            name=f"{purpose}:{nickname}",
            on_fire=lambda fired_task: self._release(key, fired_task),
        )
        self._tasks[key] = task
        return task.start()

    def _release(self, key: TimerKey, task: DelayedTask):
        if self._tasks.get(key) is task:
            del self._tasks[key]

    def cancel(self, nickname: str, purpose: str) -> bool:
        """
        Cancel the pending task for a key.

        Returns:
            True if a pending task was cancelled
        """
        task = self._tasks.pop((nickname, purpose), None)
        if task is None:
            return False
        return task.cancel()

    def cancel_all(self) -> int:
        """
        Cancel every pending task.

        Returns:
            Number of tasks cancelled
        """
        tasks = list(self._tasks.values())
        self._tasks.clear()
        return sum(1 for task in tasks if task.cancel())

    def is_armed(self, nickname: str, purpose: str) -> bool:
        """Check whether a task is pending for a key."""
        return (nickname, purpose) in self._tasks

    def armed_for(self, purpose: str) -> List[str]:
        """Get nicknames with a pending task for the given purpose."""
        return [name for (name, kind) in self._tasks if kind == purpose]

    def __len__(self) -> int:
        return len(self._tasks)

    def __repr__(self) -> str:
        keys: List[Any] = sorted(self._tasks)
        return f"TimerRegistry({keys})"

import asyncio
from typing import Any, Coroutine, TypeVar

from postpone.exceptions import ScopeClosedError


T = TypeVar("T")


class LifecycleScope:
    """
    Task scope bound to a component's lifetime. Every task launched here
    is cancelled when the owning component is destroyed.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

    @property
    def closed(self):
        return self._closed

    @property
    def tasks_count(self):
        return len(self._tasks)

    def launch(self, coroutine: Coroutine[Any, Any, T]) -> asyncio.Task[T]:
        if self._closed:
            coroutine.close()
            raise ScopeClosedError(
                f"Err. - scope {self.name} is closed and cannot launch new tasks."
            )

        task = asyncio.get_running_loop().create_task(coroutine)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        return task

    def cancel(self):
        self._closed = True

        for task in list(self._tasks):
            if not task.done():
                task.cancel()

    async def wait_closed(self):
        if len(self._tasks) > 0:
            await asyncio.gather(
                *list(self._tasks),
                return_exceptions=True,
            )

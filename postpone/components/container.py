import asyncio
from typing import Callable


class Container:
    """
    Parent view container. Pre-draw callbacks run once, on the next draw
    pass, which `invalidate()` schedules on the running loop.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.draw_count = 0
        self._pre_draw: list[Callable[[], None]] = []
        self._draw_scheduled = False

    @property
    def pending_pre_draw(self):
        return len(self._pre_draw)

    def do_on_pre_draw(self, callback: Callable[[], None]):
        self._pre_draw.append(callback)

    def invalidate(self):
        if self._draw_scheduled:
            return

        self._draw_scheduled = True
        asyncio.get_running_loop().call_soon(self.draw)

    def draw(self):
        self._draw_scheduled = False

        callbacks = self._pre_draw
        self._pre_draw = []

        for callback in callbacks:
            callback()

        self.draw_count += 1

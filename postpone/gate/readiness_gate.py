from __future__ import annotations

import asyncio

from .gate_status import GateStatus


class ReadinessGate:
    """
    One-shot, multi-waiter readiness gate.

    `request()` moves the gate to PENDING, `complete()` releases every
    suspended `wait()` call together and moves it back to IDLE. The gate
    may be requested again afterwards. All calls must come from the event
    loop that owns the waiters.
    """

    __slots__ = (
        "name",
        "_pending",
        "_waiters",
    )

    def __init__(self, name: str | None = None) -> None:
        self.name = name
        self._pending = False
        self._waiters: set[asyncio.Future[None]] = set()

    def __repr__(self) -> str:
        return (
            f"ReadinessGate(name={self.name!r}, status={self.status.value}, "
            f"waiters={len(self._waiters)})"
        )

    @property
    def postponed(self) -> bool:
        return self._pending

    @property
    def status(self) -> GateStatus:
        return GateStatus.PENDING if self._pending else GateStatus.IDLE

    @property
    def waiters_count(self) -> int:
        return len(self._waiters)

    def request(self) -> None:
        self._pending = True

    def complete(self) -> None:
        if self._pending is False:
            return

        waiters = list(self._waiters)
        self._waiters.clear()
        self._pending = False

        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(None)

    def done(self) -> None:
        self.complete()

    async def wait(self) -> None:
        if self._pending is False:
            return

        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.add(waiter)

        try:
            await waiter

        finally:
            # Released waiters were already removed by complete().
            self._waiters.discard(waiter)

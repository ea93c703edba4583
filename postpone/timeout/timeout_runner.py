import asyncio
from typing import Any, Awaitable, Callable

from postpone.components import LifecycleScope
from postpone.gate import ControlledPostponement
from postpone.logging import Logger
from postpone.logging.postpone_logging_models import TimeoutDebug, TimeoutTrace

from .bounded_run_status import BoundedRunStatus
from .timeout_config import TimeoutConfig


Operation = Callable[[], Awaitable[Any]]


class TimeoutRunner:
    """
    Completes a postponement after an operation finishes or its deadline
    elapses, whichever comes first. An elapsed deadline is a normal
    completion, not an error.
    """

    def __init__(
        self,
        config: TimeoutConfig | None = None,
        logger: Logger | None = None,
    ) -> None:
        if config is None:
            config = TimeoutConfig()

        if logger is None:
            logger = Logger()

        self._config = config
        self._logger = logger

    @property
    def config(self):
        return self._config

    async def run_bounded(
        self,
        gate: ControlledPostponement,
        operation: Operation,
        timeout: float | None = None,
        extra_delay: float | None = None,
    ) -> BoundedRunStatus:
        if gate.postponed is False:
            return BoundedRunStatus.SKIPPED

        if timeout is None:
            timeout = self._config.timeout

        gate_name = getattr(gate, "name", None) or type(gate).__name__
        status = BoundedRunStatus.COMPLETED

        try:
            try:
                async with asyncio.timeout(timeout) as deadline:
                    await operation()

            except TimeoutError:
                if deadline.expired() is False:
                    raise

                status = BoundedRunStatus.TIMED_OUT

            if extra_delay:
                await asyncio.sleep(extra_delay)

        finally:
            gate.complete()

        if status == BoundedRunStatus.TIMED_OUT:
            await self._logger.log(
                TimeoutDebug(
                    message=f"Postponed operation for {gate_name} exceeded {timeout}s deadline and was treated as complete",
                    gate=gate_name,
                    timeout=timeout,
                    extra_delay=extra_delay or 0,
                ),
                name="postpone.timeout",
            )

        else:
            await self._logger.log(
                TimeoutTrace(
                    message=f"Postponed operation for {gate_name} completed within {timeout}s deadline",
                    gate=gate_name,
                    timeout=timeout,
                    extra_delay=extra_delay or 0,
                ),
                name="postpone.timeout",
            )

        return status

    def launch_bounded(
        self,
        gate: ControlledPostponement,
        scope: LifecycleScope,
        operation: Operation,
        timeout: float | None = None,
        extra_delay: float | None = None,
    ) -> asyncio.Task[BoundedRunStatus]:
        return scope.launch(
            self.run_bounded(
                gate,
                operation,
                timeout=timeout,
                extra_delay=extra_delay,
            )
        )

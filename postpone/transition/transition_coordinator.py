from __future__ import annotations

import asyncio
import functools
from typing import Any

from postpone.adapter import ComponentAdapter
from postpone.gate import Postponement
from postpone.hierarchy import HierarchyPropagator, Propagation
from postpone.logging import Logger
from postpone.logging.postpone_logging_models import (
    PropagationDebug,
    TransitionDebug,
    TransitionInfo,
)
from postpone.timeout import TimeoutConfig


class TransitionCoordinator:
    """
    Postpones a component's enter transition until its postponement is
    ready.

    `postpone()` suspends the transition, requests the gate, propagates the
    request to postponable descendants and launches a task in the
    component's scope that starts the transition once the gate opens. With
    `await_layout` the start is deferred to the parent container's next
    pre-draw pass.
    """

    def __init__(
        self,
        config: TimeoutConfig | None = None,
        propagator: HierarchyPropagator | None = None,
        logger: Logger | None = None,
    ) -> None:
        if config is None:
            config = TimeoutConfig()

        if propagator is None:
            propagator = HierarchyPropagator()

        if logger is None:
            logger = Logger()

        self._config = config
        self._propagator = propagator
        self._logger = logger
        self.propagations: dict[Any, Propagation] = {}

    def postpone(
        self,
        root: Any,
        postponement: Postponement | None = None,
        await_layout: bool | None = None,
    ) -> asyncio.Task[None]:
        if postponement is None:
            postponement = ComponentAdapter(root).gate()

        if await_layout is None:
            await_layout = self._config.await_layout

        root.postpone_enter_transition()
        postponement.request()

        propagation = self._propagator.propagate(root)

        task = root.scope.launch(
            self._start_when_ready(
                root,
                postponement,
                propagation,
                await_layout,
            )
        )
        self.propagations[root] = propagation

        # Entries live only while their start task runs.
        task.add_done_callback(
            functools.partial(self._release, root, propagation)
        )

        return task

    def _release(
        self,
        root: Any,
        propagation: Propagation,
        task: asyncio.Task[None],
    ):
        if self.propagations.get(root) is propagation:
            del self.propagations[root]

    def postpone_all(self, *roots: Any) -> TransitionCoordinator:
        for root in roots:
            self.postpone(root)

        return self

    async def _start_when_ready(
        self,
        root: Any,
        postponement: Postponement,
        propagation: Propagation,
        await_layout: bool,
    ):
        gate_name = getattr(postponement, "name", None) or root.name

        await self._logger.log(
            PropagationDebug(
                message=f"Requested postponement on {len(propagation.requested)} descendants of {root.name}",
                component=root.name,
                descendants=len(propagation.requested),
            ),
            name="postpone.transition",
        )

        await postponement.wait()

        container = root.parent_container

        if await_layout and container is not None:
            container.do_on_pre_draw(root.start_postponed_enter_transition)
            container.invalidate()

            await self._logger.log(
                TransitionDebug(
                    message=f"Deferred enter transition of {root.name} to next pre-draw pass",
                    component=root.name,
                    gate=gate_name,
                ),
                name="postpone.transition",
            )

            return

        root.start_postponed_enter_transition()

        await self._logger.log(
            TransitionInfo(
                message=f"Started postponed enter transition of {root.name}",
                component=root.name,
                gate=gate_name,
            ),
            name="postpone.transition",
        )

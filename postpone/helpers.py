from __future__ import annotations

import asyncio
from typing import Any

from postpone.adapter import try_get_postponement
from postpone.components import Component, LifecyclePhase, LifecycleScope
from postpone.gate import ControlledPostponement, Postponement, ReadinessGate
from postpone.timeout import (
    BoundedRunStatus,
    Operation,
    TimeoutConfig,
    TimeoutRunner,
)
from postpone.transition import TransitionCoordinator


_runner = TimeoutRunner()
_coordinator = TransitionCoordinator()


def configure_defaults(config: TimeoutConfig):
    """
    Replace the runner and coordinator behind the free functions so that
    omitted timeouts, extra delays and layout waits come from `config`.
    """
    global _runner, _coordinator

    _runner = TimeoutRunner(config=config)
    _coordinator = TransitionCoordinator(config=config)


def default_config() -> TimeoutConfig:
    return _runner.config


async def _noop():
    pass


def controlled_postponement(name: str | None = None) -> ControlledPostponement:
    """
    Create a standalone postponement. The caller is responsible for calling
    `done()` once the postponed work is ready.
    """
    return ReadinessGate(name=name)


async def done_after(
    postponement: ControlledPostponement,
    operation: Operation,
    timeout: float | None = None,
    extra_delay: float | None = None,
) -> BoundedRunStatus:
    """
    Run `operation` with `timeout`, then complete `postponement`. Nothing
    runs if the postponement was not requested. An omitted timeout comes
    from the configured defaults.
    """
    return await _runner.run_bounded(
        postponement,
        operation,
        timeout=timeout,
        extra_delay=extra_delay,
    )


def postpone_in(
    postponement: ControlledPostponement,
    scope: LifecycleScope,
    operation: Operation,
    timeout: float | None = None,
) -> asyncio.Task[BoundedRunStatus]:
    return _runner.launch_bounded(
        postponement,
        scope,
        operation,
        timeout=timeout,
    )


def postpone_until_view_created(
    component: Component,
    operation: Operation | None = None,
    timeout: float | None = None,
    extra_delay: float | None = None,
) -> ControlledPostponement:
    """
    Postpone `component` until its view is created and started and
    `operation` has completed. The extra delay runs after the bounded
    operation and is not cut short by `timeout`, so the longest possible
    wait is `timeout + extra_delay`.
    """
    if operation is None:
        operation = _noop

    postponement = ReadinessGate(name=component.name)

    async def complete_when_started():
        await component.wait_for_phase(LifecyclePhase.STARTED)
        await done_after(
            postponement,
            operation,
            timeout=timeout,
            extra_delay=(
                _runner.config.extra_delay if extra_delay is None else extra_delay
            ),
        )

    def on_view_created():
        if component.phase < LifecyclePhase.DESTROYED:
            component.scope.launch(complete_when_started())

    component.when_phase(LifecyclePhase.VIEW_CREATED, on_view_created)

    return postponement


def postpone_controlled(
    owner: Component,
    timeout: float | None = None,
) -> ControlledPostponement:
    """
    Create a postponement that `owner`'s scope completes after `timeout`
    unless `done()` is called first.
    """
    postponement = ReadinessGate(name=owner.name)

    if timeout is None:
        timeout = _runner.config.timeout

    async def complete_after_timeout():
        await asyncio.sleep(timeout)
        postponement.done()

    owner.scope.launch(complete_after_timeout())

    return postponement


async def await_children(container: Component):
    """
    Wait for every postponable child currently added to `container`.
    Children added later are not waited for.
    """
    for child in container.children:
        if postponement := try_get_postponement(child):
            await postponement.wait()


async def await_ready(component: Component):
    """
    Wait until `component` is created, then for its own postponement if
    it is postponable.
    """
    await component.wait_for_phase(LifecyclePhase.CREATED)

    if postponement := try_get_postponement(component):
        await postponement.wait()


def postpone_transition(
    root: Any,
    postponement: Postponement | None = None,
    coordinator: TransitionCoordinator | None = None,
) -> asyncio.Task[None]:
    if coordinator is None:
        coordinator = _coordinator

    return coordinator.postpone(root, postponement=postponement)


def postpone_transitions(
    *roots: Any,
    coordinator: TransitionCoordinator | None = None,
) -> TransitionCoordinator:
    if coordinator is None:
        coordinator = _coordinator

    return coordinator.postpone_all(*roots)

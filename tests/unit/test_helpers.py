"""
Tests for the application facing helper functions.

Covers:
- controlled_postponement, done_after and postpone_in
- postpone_controlled completing after its timeout
- postpone_until_view_created completing after view creation and start
- await_children and await_ready
- Defaults installed by load_settings
- Logging helpers running on successive event loops
"""

import asyncio
import pytest

from postpone import (
    BoundedRunStatus,
    Component,
    ControlledPostponement,
    LifecyclePhase,
    TimeoutConfig,
    await_children,
    await_ready,
    configure_defaults,
    controlled_postponement,
    default_config,
    done_after,
    load_settings,
    postpone_controlled,
    postpone_in,
    postpone_transition,
    postpone_until_view_created,
)
from postpone.env import Env
from postpone.logging import LoggingConfig


@pytest.fixture
def restore_defaults():
    config = default_config()
    logging_config = LoggingConfig()
    level = logging_config.level

    yield

    configure_defaults(config)
    logging_config.update(log_level=level.value.lower())


class TestControlledHelpers:
    """Test standalone postponement helpers."""

    def test_controlled_postponement_is_idle(self) -> None:
        postponement = controlled_postponement(name="standalone")

        assert isinstance(postponement, ControlledPostponement)
        assert postponement.postponed is False

    @pytest.mark.asyncio
    async def test_done_after_skips_idle_postponement(self) -> None:
        postponement = controlled_postponement()
        calls: list[str] = []

        async def load():
            calls.append("load")

        status = await done_after(postponement, load)

        assert status == BoundedRunStatus.SKIPPED
        assert calls == []

    @pytest.mark.asyncio
    async def test_done_after_completes_requested_postponement(self) -> None:
        postponement = controlled_postponement()
        postponement.request()

        status = await done_after(postponement, lambda: asyncio.sleep(0.01))

        assert status == BoundedRunStatus.COMPLETED
        assert postponement.postponed is False

    @pytest.mark.asyncio
    async def test_postpone_in_launches_in_scope(self) -> None:
        owner = Component("owner")
        postponement = controlled_postponement()
        postponement.request()

        task = postpone_in(postponement, owner.scope, lambda: asyncio.sleep(0.01), timeout=1.0)

        await postponement.wait()

        assert await task == BoundedRunStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_postpone_controlled_completes_after_timeout(self) -> None:
        owner = Component("owner")
        postponement = postpone_controlled(owner, timeout=0.05)
        postponement.request()

        loop = asyncio.get_running_loop()
        start = loop.time()

        await asyncio.wait_for(postponement.wait(), timeout=1.0)

        assert loop.time() - start >= 0.04
        owner.destroy()

    @pytest.mark.asyncio
    async def test_postpone_controlled_done_early(self) -> None:
        owner = Component("owner")
        postponement = postpone_controlled(owner, timeout=5.0)
        postponement.request()

        postponement.done()

        await asyncio.wait_for(postponement.wait(), timeout=0.1)
        owner.destroy()
        await owner.scope.wait_closed()


class TestViewCreatedHelper:
    """Test postpone_until_view_created."""

    @pytest.mark.asyncio
    async def test_completes_after_view_created_and_started(self) -> None:
        component = Component("details")
        component.attach()

        loaded: list[str] = []

        async def load():
            loaded.append("data")

        postponement = postpone_until_view_created(
            component,
            load,
            timeout=1.0,
            extra_delay=0.01,
        )
        postponement.request()

        component.create_view()
        await asyncio.sleep(0.02)

        assert loaded == []
        assert postponement.postponed

        component.move_to(LifecyclePhase.STARTED)
        await asyncio.wait_for(postponement.wait(), timeout=1.0)

        assert loaded == ["data"]
        component.destroy()

    @pytest.mark.asyncio
    async def test_slow_operation_is_bounded(self) -> None:
        component = Component("details")
        component.attach()
        never = asyncio.Event()

        postponement = postpone_until_view_created(
            component,
            never.wait,
            timeout=0.05,
            extra_delay=0.02,
        )
        postponement.request()

        loop = asyncio.get_running_loop()
        start = loop.time()

        component.create_view()
        component.move_to(LifecyclePhase.STARTED)
        await asyncio.wait_for(postponement.wait(), timeout=1.0)

        assert loop.time() - start >= 0.06
        component.destroy()

    @pytest.mark.asyncio
    async def test_transition_follows_view_readiness(self) -> None:
        component = Component("details")
        component.attach()
        postponement = postpone_until_view_created(component, timeout=1.0, extra_delay=0)

        task = postpone_transition(component, postponement=postponement)

        component.create_view()
        component.move_to(LifecyclePhase.STARTED)
        await asyncio.wait_for(task, timeout=1.0)

        assert component.transition_started
        component.destroy()


class TestAwaitHelpers:
    """Test await_children and await_ready."""

    @pytest.mark.asyncio
    async def test_await_children_waits_for_every_postponable(self, postponable) -> None:
        container = Component("container")
        first = postponable("first")
        second = postponable("second")
        container.add_child(first)
        container.add_child(second)
        container.add_child(Component("plain"))

        first.postponement.request()
        second.postponement.request()

        waiter = asyncio.create_task(await_children(container))

        first.postponement.done()
        await asyncio.sleep(0.01)

        assert waiter.done() is False

        second.postponement.done()
        await asyncio.wait_for(waiter, timeout=0.1)

    @pytest.mark.asyncio
    async def test_await_ready_waits_for_created_phase(self, postponable) -> None:
        component = postponable("details")

        waiter = asyncio.create_task(await_ready(component))
        await asyncio.sleep(0.01)

        assert waiter.done() is False

        component.postponement.request()
        component.move_to(LifecyclePhase.CREATED)
        await asyncio.sleep(0.01)

        assert waiter.done() is False

        component.postponement.done()
        await asyncio.wait_for(waiter, timeout=0.1)

    @pytest.mark.asyncio
    async def test_await_ready_for_plain_component(self) -> None:
        component = Component("plain")
        component.move_to(LifecyclePhase.CREATED)

        await asyncio.wait_for(await_ready(component), timeout=0.1)


class TestConfiguredDefaults:
    """Test that loaded settings reach the free functions."""

    @pytest.mark.asyncio
    async def test_loaded_timeout_bounds_done_after(self, tmp_path, restore_defaults) -> None:
        loop = asyncio.get_running_loop()
        load_settings(
            env_file=str(tmp_path / "missing.env"),
            override=Env(
                POSTPONE_TIMEOUT="50ms",
                POSTPONE_LOG_LEVEL="error",
            ),
        )

        postponement = controlled_postponement()
        postponement.request()

        started = loop.time()
        status = await done_after(postponement, lambda: asyncio.sleep(10))

        assert status == BoundedRunStatus.TIMED_OUT
        assert loop.time() - started < 0.3
        assert postponement.postponed is False

    @pytest.mark.asyncio
    async def test_configured_timeout_bounds_postpone_controlled(self, restore_defaults) -> None:
        configure_defaults(TimeoutConfig(timeout=0.05))
        owner = Component("owner")
        owner.attach()

        postponement = postpone_controlled(owner)
        postponement.request()

        await asyncio.wait_for(postponement.wait(), timeout=0.3)

        assert postponement.postponed is False
        assert default_config().timeout == pytest.approx(0.05)

        owner.destroy()


class TestHelpersAcrossEventLoops:
    """Test the shared helpers with logging enabled on successive loops."""

    def test_done_after_on_each_loop(self, restore_defaults) -> None:
        LoggingConfig().update(log_level="trace")

        async def complete_once():
            postponement = controlled_postponement(name="reloaded")
            postponement.request()

            return await done_after(
                postponement,
                lambda: asyncio.sleep(0),
                timeout=0.1,
            )

        statuses = [asyncio.run(complete_once()) for _ in range(2)]

        assert statuses == [
            BoundedRunStatus.COMPLETED,
            BoundedRunStatus.COMPLETED,
        ]

    def test_postpone_transition_on_each_loop(self, restore_defaults) -> None:
        LoggingConfig().update(log_level="info")

        async def transition_once():
            screen = Component("screen")
            screen.attach()

            postponement = controlled_postponement(name="screen")
            task = postpone_transition(screen, postponement)
            postponement.done()

            await asyncio.wait_for(task, timeout=0.5)
            screen.destroy()

            return screen.transition_started

        assert [asyncio.run(transition_once()) for _ in range(2)] == [True, True]

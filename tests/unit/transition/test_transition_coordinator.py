"""
Tests for TransitionCoordinator.

Covers:
- Suspending the enter transition and requesting the gate
- Starting the transition once the gate opens
- Deferring the start to the next pre-draw pass
- Propagation to descendants
- Tear down releasing the suspended waiter
"""

import asyncio
import pytest

from postpone import Component, Container, LifecyclePhase, ReadinessGate, TimeoutConfig, TransitionCoordinator


class ManualContainer(Container):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.invalidated = False

    def invalidate(self):
        self.invalidated = True


class TestTransitionCoordinatorStart:
    """Test the postpone and start flow."""

    @pytest.mark.asyncio
    async def test_postpone_suspends_and_requests(self, postponable) -> None:
        root = postponable("details")
        root.attach()

        task = TransitionCoordinator().postpone(root)
        await asyncio.sleep(0.01)

        assert root.transition_postponed
        assert root.postponement.postponed
        assert task.done() is False

        root.postponement.done()
        await asyncio.wait_for(task, timeout=0.1)

        assert root.transition_started
        assert root.transition_postponed is False

    @pytest.mark.asyncio
    async def test_explicit_postponement_for_plain_component(self) -> None:
        root = Component("plain")
        root.attach()
        gate = ReadinessGate(name="external")

        task = TransitionCoordinator().postpone(root, postponement=gate)
        await asyncio.sleep(0)

        assert gate.postponed

        gate.complete()
        await asyncio.wait_for(task, timeout=0.1)

        assert root.transition_started

    @pytest.mark.asyncio
    async def test_start_waits_for_pre_draw(self, postponable) -> None:
        root = postponable("details")
        container = ManualContainer("host")
        root.attach()
        root.create_view(container)

        task = TransitionCoordinator().postpone(root)
        root.postponement.done()
        await asyncio.wait_for(task, timeout=0.1)

        assert root.transition_started is False
        assert container.invalidated
        assert container.pending_pre_draw == 1

        container.draw()

        assert root.transition_started
        assert container.draw_count == 1

    @pytest.mark.asyncio
    async def test_start_immediately_without_layout_wait(self, postponable) -> None:
        root = postponable("details")
        container = Container("host")
        root.attach()
        root.create_view(container)

        coordinator = TransitionCoordinator(config=TimeoutConfig(await_layout=False))
        task = coordinator.postpone(root)
        root.postponement.done()
        await asyncio.wait_for(task, timeout=0.1)

        assert root.transition_started
        assert container.draw_count == 0


class TestTransitionCoordinatorHierarchy:
    """Test propagation through the coordinator."""

    @pytest.mark.asyncio
    async def test_postpone_propagates_to_children(self, postponable) -> None:
        root = postponable("root")
        child = postponable("child")
        root.add_child(child)
        root.attach()

        coordinator = TransitionCoordinator()
        coordinator.postpone(root)

        assert child.postponement.postponed
        assert coordinator.propagations[root].requested == ["child"]

        root.destroy()

    @pytest.mark.asyncio
    async def test_postpone_all_chains(self, postponable) -> None:
        first = postponable("first")
        second = postponable("second")
        first.attach()
        second.attach()

        coordinator = TransitionCoordinator()

        assert coordinator.postpone_all(first, second) is coordinator
        assert first.postponement.postponed
        assert second.postponement.postponed

        first.destroy()
        second.destroy()


class TestTransitionCoordinatorTeardown:
    """Test that tear down never leaves waiters behind."""

    @pytest.mark.asyncio
    async def test_destroy_cancels_waiting_task(self, postponable) -> None:
        root = postponable("details")
        root.attach()
        root.move_to(LifecyclePhase.CREATED)

        task = TransitionCoordinator().postpone(root)
        await asyncio.sleep(0)

        assert root.postponement.waiters_count == 1

        root.destroy()
        await root.scope.wait_closed()

        assert task.cancelled()
        assert root.postponement.waiters_count == 0
        assert root.transition_started is False

    @pytest.mark.asyncio
    async def test_destroy_releases_propagation(self, postponable) -> None:
        root = postponable("details")
        root.attach()

        coordinator = TransitionCoordinator()
        coordinator.postpone(root)
        propagation = coordinator.propagations[root]

        root.destroy()
        await root.scope.wait_closed()
        await asyncio.sleep(0)

        assert coordinator.propagations == {}
        assert propagation.subscription.closed

    @pytest.mark.asyncio
    async def test_started_transition_releases_propagation(self, postponable) -> None:
        root = postponable("details")
        root.attach()

        coordinator = TransitionCoordinator()
        task = coordinator.postpone(root)

        root.postponement.done()
        await asyncio.wait_for(task, timeout=0.1)
        await asyncio.sleep(0)

        assert root.transition_started
        assert coordinator.propagations == {}

        root.destroy()

    @pytest.mark.asyncio
    async def test_same_named_roots_are_tracked_separately(self, postponable) -> None:
        first = postponable("details")
        second = postponable("details")
        first.attach()
        second.attach()

        coordinator = TransitionCoordinator().postpone_all(first, second)

        assert set(coordinator.propagations) == {first, second}

        first.destroy()
        await first.scope.wait_closed()
        await asyncio.sleep(0)

        assert list(coordinator.propagations) == [second]

        second.destroy()

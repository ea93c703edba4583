from __future__ import annotations

import asyncio
import itertools
from typing import Callable

from postpone.exceptions import LifecycleError

from .container import Container
from .lifecycle_phase import LifecyclePhase
from .lifecycle_scope import LifecycleScope


AttachListener = Callable[["Component"], None]
PhaseCallback = Callable[[], None]


class Component:
    """
    In-process component tree node.

    A component becomes attached when it is attached as a root or added to
    an attached parent. Attaching a subtree notifies the attach listeners of
    every ancestor once per newly attached node. Children follow their
    parent's lifecycle phase and are destroyed with it.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.scope = LifecycleScope(name)

        self._phase = LifecyclePhase.INITIALIZED
        self._attached = False
        self._parent: Component | None = None
        self._children: list[Component] = []

        self._listener_ids = itertools.count()
        self._attach_listeners: dict[int, AttachListener] = {}
        self._phase_callbacks: dict[int, tuple[LifecyclePhase, PhaseCallback]] = {}

        self._container: Container | None = None
        self.transition_postponed = False
        self.transition_started = False
        self.transition_started_at: float | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, phase={self._phase.name})"

    @property
    def attached(self):
        return self._attached

    @property
    def phase(self):
        return self._phase

    @property
    def parent(self):
        return self._parent

    @property
    def children(self):
        return list(self._children)

    @property
    def parent_container(self):
        return self._container

    def descendants(self):
        for child in self._children:
            yield child
            yield from child.descendants()

    def attach(self):
        if self._parent is not None:
            raise LifecycleError(
                f"Err. - component {self.name} is a child of {self._parent.name} and is attached through it."
            )

        self._ensure_alive()

        if self._attached:
            return

        self._attach_subtree()

    def add_child(self, child: Component):
        self._ensure_alive()

        if child._parent is not None:
            raise LifecycleError(
                f"Err. - component {child.name} already belongs to {child._parent.name}."
            )

        child._parent = self
        self._children.append(child)

        if self._attached:
            child._attach_subtree()

    def remove_child(self, child: Component):
        if child._parent is not self:
            return

        self._children.remove(child)
        child._parent = None
        child._detach_subtree()

    def subscribe_attached(self, listener: AttachListener) -> Callable[[], None]:
        listener_id = next(self._listener_ids)
        self._attach_listeners[listener_id] = listener

        def unsubscribe():
            self._attach_listeners.pop(listener_id, None)

        return unsubscribe

    def when_phase(
        self,
        phase: LifecyclePhase,
        callback: PhaseCallback,
    ) -> Callable[[], None]:
        if self._phase >= phase:
            callback()
            return lambda: None

        callback_id = next(self._listener_ids)
        self._phase_callbacks[callback_id] = (phase, callback)

        def cancel():
            self._phase_callbacks.pop(callback_id, None)

        return cancel

    async def wait_for_phase(self, phase: LifecyclePhase):
        if self._phase >= phase:
            return

        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()

        def resolve():
            if not waiter.done():
                waiter.set_result(None)

        cancel = self.when_phase(phase, resolve)

        try:
            await waiter

        finally:
            cancel()

    def move_to(self, phase: LifecyclePhase):
        if phase == LifecyclePhase.DESTROYED:
            self.destroy()
            return

        self._ensure_alive()

        if phase < self._phase:
            raise LifecycleError(
                f"Err. - component {self.name} cannot move from {self._phase.name} back to {phase.name}."
            )

        if phase == self._phase:
            return

        self._set_phase(phase)

        for child in self.children:
            if child._attached and child._phase < phase:
                child.move_to(phase)

    def create_view(self, container: Container | None = None):
        self._container = container
        self.move_to(LifecyclePhase.VIEW_CREATED)

    def destroy(self):
        if self._phase == LifecyclePhase.DESTROYED:
            return

        for child in self.children:
            child.destroy()

        self._set_phase(LifecyclePhase.DESTROYED)
        self.scope.cancel()
        self._attach_listeners.clear()

    def postpone_enter_transition(self):
        self.transition_postponed = True

    def start_postponed_enter_transition(self):
        if self.transition_postponed is False:
            return

        self.transition_postponed = False
        self.transition_started = True
        self.transition_started_at = asyncio.get_running_loop().time()

    def _ensure_alive(self):
        if self._phase == LifecyclePhase.DESTROYED:
            raise LifecycleError(f"Err. - component {self.name} is destroyed.")

    def _set_phase(self, phase: LifecyclePhase):
        self._phase = phase

        reached = [
            callback_id
            for callback_id, (target, _) in self._phase_callbacks.items()
            if phase >= target
        ]

        for callback_id in reached:
            # An earlier callback may have cancelled this one.
            if (registered := self._phase_callbacks.pop(callback_id, None)) is None:
                continue

            _, callback = registered
            callback()

    def _attach_subtree(self):
        self._attached = True

        if self._phase < LifecyclePhase.ATTACHED:
            self._set_phase(LifecyclePhase.ATTACHED)

        self._notify_attached(self)

        parent_phase = self._parent.phase if self._parent else LifecyclePhase.ATTACHED
        if self._phase < parent_phase:
            self.move_to(parent_phase)

        for child in self.children:
            child._attach_subtree()

    def _detach_subtree(self):
        self._attached = False

        for child in self._children:
            child._detach_subtree()

    def _notify_attached(self, node: Component):
        ancestor = node._parent

        while ancestor is not None:
            for listener in list(ancestor._attach_listeners.values()):
                listener(node)

            ancestor = ancestor._parent

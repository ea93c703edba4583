from __future__ import annotations

from typing import Callable, Protocol, Sequence, runtime_checkable

from .lifecycle_phase import LifecyclePhase
from .lifecycle_scope import LifecycleScope


@runtime_checkable
class ViewContainer(Protocol):
    def do_on_pre_draw(self, callback: Callable[[], None]) -> None: ...

    def invalidate(self) -> None: ...


@runtime_checkable
class ComponentNode(Protocol):
    name: str

    @property
    def attached(self) -> bool: ...

    @property
    def phase(self) -> LifecyclePhase: ...

    @property
    def children(self) -> Sequence[ComponentNode]: ...

    @property
    def scope(self) -> LifecycleScope: ...

    def subscribe_attached(
        self,
        listener: Callable[[ComponentNode], None],
    ) -> Callable[[], None]: ...

    def when_phase(
        self,
        phase: LifecyclePhase,
        callback: Callable[[], None],
    ) -> Callable[[], None]: ...


@runtime_checkable
class TransitionTarget(Protocol):
    @property
    def parent_container(self) -> ViewContainer | None: ...

    def postpone_enter_transition(self) -> None: ...

    def start_postponed_enter_transition(self) -> None: ...

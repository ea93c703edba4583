from typing import Protocol, runtime_checkable


@runtime_checkable
class Postponement(Protocol):
    """
    Readiness status of a component. Callers `request()` a postponement
    and `wait()` until whoever owns it reports the postponed work ready.
    """

    @property
    def postponed(self) -> bool: ...

    def request(self) -> None: ...

    async def wait(self) -> None: ...


@runtime_checkable
class ControlledPostponement(Postponement, Protocol):
    """
    A `Postponement` completed manually. `done()` is an alias of
    `complete()`.
    """

    def complete(self) -> None: ...

    def done(self) -> None: ...


@runtime_checkable
class Postponable(Protocol):
    """
    Capability marker. Components exposing a `postponement` take part in
    hierarchy propagation and transition coordination.
    """

    @property
    def postponement(self) -> Postponement: ...

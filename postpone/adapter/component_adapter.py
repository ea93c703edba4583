from typing import Any

from postpone.gate import Postponable, Postponement, ReadinessGate


def try_get_postponement(node: Any) -> Postponement | None:
    if not isinstance(node, Postponable):
        return None

    postponement = node.postponement
    if isinstance(postponement, Postponement):
        return postponement

    return None


class ComponentAdapter:
    """Binds one component to the gate that postpones it."""

    def __init__(self, node: Any) -> None:
        self.node = node
        self._gate: Postponement | None = None

    def gate(self) -> Postponement:
        if self._gate is None:
            self._gate = try_get_postponement(self.node)

        if self._gate is None:
            self._gate = ReadinessGate(name=getattr(self.node, "name", None))

        return self._gate

    @staticmethod
    def try_get_postponement(node: Any) -> Postponement | None:
        return try_get_postponement(node)

    @staticmethod
    def request_if_postponable(node: Any) -> bool:
        if postponement := try_get_postponement(node):
            postponement.request()
            return True

        return False

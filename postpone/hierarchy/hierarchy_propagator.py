from dataclasses import dataclass, field
from typing import Any

from postpone.adapter import ComponentAdapter
from postpone.components import ComponentNode, LifecyclePhase

from .attach_subscription import AttachSubscription


@dataclass(slots=True)
class Propagation:
    root: str
    requested: list[str] = field(default_factory=list)
    subscription: AttachSubscription | None = None


class HierarchyPropagator:
    """
    Requests postponement on every postponable descendant of a root.

    Descendants present at call time are visited depth first. If the root
    has not reached the cutoff phase, an `AttachSubscription` also covers
    descendants attached until then. Descendants attached after the cutoff
    are not covered.
    """

    def __init__(
        self,
        cutoff: LifecyclePhase = LifecyclePhase.STARTED,
    ) -> None:
        self.cutoff = cutoff

    def propagate(self, root: ComponentNode) -> Propagation:
        propagation = Propagation(
            root=root.name,
        )

        for descendant in self._walk(root):
            if ComponentAdapter.request_if_postponable(descendant):
                propagation.requested.append(descendant.name)

        if root.phase >= self.cutoff:
            return propagation

        def request(node: Any):
            if ComponentAdapter.request_if_postponable(node):
                propagation.requested.append(getattr(node, "name", repr(node)))

        propagation.subscription = AttachSubscription(
            root,
            request,
            cutoff=self.cutoff,
        )
        propagation.subscription.start()

        return propagation

    def _walk(self, node: ComponentNode):
        for child in node.children:
            yield child
            yield from self._walk(child)

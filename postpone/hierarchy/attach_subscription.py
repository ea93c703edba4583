from typing import Any, Callable

from postpone.components import ComponentNode, LifecyclePhase


class AttachSubscription:
    """
    Listens for descendants attached under `root` until `root` reaches the
    cutoff phase (or is destroyed), then unsubscribes itself.
    """

    def __init__(
        self,
        root: ComponentNode,
        on_attached: Callable[[Any], None],
        cutoff: LifecyclePhase = LifecyclePhase.STARTED,
    ) -> None:
        self.root = root
        self.cutoff = cutoff
        self.observed: list[str] = []

        self._on_attached = on_attached
        self._unsubscribe: Callable[[], None] | None = None
        self._cancel_cutoff: Callable[[], None] | None = None
        self._started = False
        self._closed = False

    @property
    def active(self):
        return self._started and self._closed is False

    @property
    def closed(self):
        return self._closed

    def start(self):
        if self._started or self._closed:
            return

        self._started = True
        self._unsubscribe = self.root.subscribe_attached(self._attached)

        cancel_cutoff = self.root.when_phase(self.cutoff, self.stop)

        if self._closed:
            return

        self._cancel_cutoff = cancel_cutoff

    def stop(self):
        if self._closed:
            return

        self._closed = True

        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

        if self._cancel_cutoff:
            self._cancel_cutoff()
            self._cancel_cutoff = None

    def _attached(self, node: Any):
        if self._closed:
            return

        self.observed.append(getattr(node, "name", repr(node)))
        self._on_attached(node)

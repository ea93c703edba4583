from .component import Component as Component
from .component_node import (
    ComponentNode as ComponentNode,
    TransitionTarget as TransitionTarget,
    ViewContainer as ViewContainer,
)
from .container import Container as Container
from .lifecycle_phase import LifecyclePhase as LifecyclePhase
from .lifecycle_scope import LifecycleScope as LifecycleScope

from .adapter import (
    ComponentAdapter as ComponentAdapter,
    try_get_postponement as try_get_postponement,
)
from .components import (
    Component as Component,
    ComponentNode as ComponentNode,
    Container as Container,
    LifecyclePhase as LifecyclePhase,
    LifecycleScope as LifecycleScope,
)
from .exceptions import (
    LifecycleError as LifecycleError,
    PostponeError as PostponeError,
    ScopeClosedError as ScopeClosedError,
)
from .gate import (
    ControlledPostponement as ControlledPostponement,
    GateStatus as GateStatus,
    Postponable as Postponable,
    Postponement as Postponement,
    ReadinessGate as ReadinessGate,
)
from .helpers import (
    await_children as await_children,
    await_ready as await_ready,
    configure_defaults as configure_defaults,
    controlled_postponement as controlled_postponement,
    default_config as default_config,
    done_after as done_after,
    postpone_controlled as postpone_controlled,
    postpone_in as postpone_in,
    postpone_transition as postpone_transition,
    postpone_transitions as postpone_transitions,
    postpone_until_view_created as postpone_until_view_created,
)
from .hierarchy import (
    AttachSubscription as AttachSubscription,
    HierarchyPropagator as HierarchyPropagator,
)
from .settings import load_settings as load_settings
from .timeout import (
    BoundedRunStatus as BoundedRunStatus,
    TimeoutConfig as TimeoutConfig,
    TimeoutRunner as TimeoutRunner,
)
from .transition import TransitionCoordinator as TransitionCoordinator

from .attach_subscription import AttachSubscription as AttachSubscription
from .hierarchy_propagator import (
    HierarchyPropagator as HierarchyPropagator,
    Propagation as Propagation,
)

from .component_adapter import (
    ComponentAdapter as ComponentAdapter,
    try_get_postponement as try_get_postponement,
)

from .gate_status import GateStatus as GateStatus
from .postponement import (
    ControlledPostponement as ControlledPostponement,
    Postponable as Postponable,
    Postponement as Postponement,
)
from .readiness_gate import ReadinessGate as ReadinessGate

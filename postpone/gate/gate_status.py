from enum import Enum


class GateStatus(Enum):
    IDLE = "IDLE"
    PENDING = "PENDING"

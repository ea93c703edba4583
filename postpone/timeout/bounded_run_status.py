from enum import Enum


class BoundedRunStatus(Enum):
    SKIPPED = "SKIPPED"
    COMPLETED = "COMPLETED"
    TIMED_OUT = "TIMED_OUT"

from enum import IntEnum


class LifecyclePhase(IntEnum):
    INITIALIZED = 0
    ATTACHED = 1
    CREATED = 2
    VIEW_CREATED = 3
    STARTED = 4
    RESUMED = 5
    DESTROYED = 6

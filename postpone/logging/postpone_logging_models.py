from .models import Entry, LogLevel


class TimeoutTrace(Entry, kw_only=True):
    gate: str
    timeout: float
    extra_delay: float
    level: LogLevel = LogLevel.TRACE

class TimeoutDebug(Entry, kw_only=True):
    gate: str
    timeout: float
    extra_delay: float
    level: LogLevel = LogLevel.DEBUG

class PropagationDebug(Entry, kw_only=True):
    component: str
    descendants: int
    level: LogLevel = LogLevel.DEBUG

class TransitionDebug(Entry, kw_only=True):
    component: str
    gate: str
    level: LogLevel = LogLevel.DEBUG

class TransitionInfo(Entry, kw_only=True):
    component: str
    gate: str
    level: LogLevel = LogLevel.INFO

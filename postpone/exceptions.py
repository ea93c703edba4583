class PostponeError(Exception):
    pass


class ScopeClosedError(PostponeError):
    pass


class LifecycleError(PostponeError):
    pass

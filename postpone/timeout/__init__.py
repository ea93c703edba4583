from .bounded_run_status import BoundedRunStatus as BoundedRunStatus
from .timeout_config import (
    DEFAULT_EXTRA_DELAY as DEFAULT_EXTRA_DELAY,
    DEFAULT_TIMEOUT as DEFAULT_TIMEOUT,
    TimeoutConfig as TimeoutConfig,
)
from .timeout_runner import (
    Operation as Operation,
    TimeoutRunner as TimeoutRunner,
)

from typing import Callable, Dict, Literal, Union

from pydantic import BaseModel, StrictBool, StrictStr

PrimaryType = Union[str, int, float, bytes, bool]


def _to_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Env(BaseModel):
    POSTPONE_TIMEOUT: StrictStr = "0.5s"
    POSTPONE_EXTRA_DELAY: StrictStr = "0.1s"
    POSTPONE_AWAIT_LAYOUT: StrictBool = True
    POSTPONE_LOG_LEVEL: StrictStr = "info"
    POSTPONE_LOG_OUTPUT: Literal["stdout", "stderr"] = "stderr"
    POSTPONE_LOGS_DIRECTORY: StrictStr | None = None

    @classmethod
    def types_map(self) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "POSTPONE_TIMEOUT": str,
            "POSTPONE_EXTRA_DELAY": str,
            "POSTPONE_AWAIT_LAYOUT": _to_bool,
            "POSTPONE_LOG_LEVEL": str,
            "POSTPONE_LOG_OUTPUT": str,
            "POSTPONE_LOGS_DIRECTORY": str,
        }

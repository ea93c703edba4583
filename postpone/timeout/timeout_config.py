from dataclasses import dataclass

from postpone.env import Env, TimeParser


DEFAULT_TIMEOUT = 0.5
DEFAULT_EXTRA_DELAY = 0.1


@dataclass(slots=True)
class TimeoutConfig:
    """Timing settings for bounded postponements, in seconds."""

    timeout: float = DEFAULT_TIMEOUT
    extra_delay: float = DEFAULT_EXTRA_DELAY
    await_layout: bool = True

    @classmethod
    def from_env(cls, env: Env) -> "TimeoutConfig":
        parser = TimeParser()

        return cls(
            timeout=parser.parse(env.POSTPONE_TIMEOUT),
            extra_delay=parser.parse(env.POSTPONE_EXTRA_DELAY),
            await_layout=env.POSTPONE_AWAIT_LAYOUT,
        )

from postpone.env import Env, load_env
from postpone.helpers import configure_defaults
from postpone.logging import LoggingConfig
from postpone.timeout import TimeoutConfig


def load_settings(
    env_file: str | None = None,
    override: Env | None = None,
) -> TimeoutConfig:
    """
    Load `POSTPONE_*` settings from the environment and `env_file`, apply
    the logging settings, and install the timing configuration as the
    default for the free functions in `postpone.helpers`.
    """
    env = load_env(Env, env_file=env_file, override=override)

    LoggingConfig().update(
        log_directory=env.POSTPONE_LOGS_DIRECTORY,
        log_level=env.POSTPONE_LOG_LEVEL,
        log_output=env.POSTPONE_LOG_OUTPUT,
    )

    config = TimeoutConfig.from_env(env)
    configure_defaults(config)

    return config

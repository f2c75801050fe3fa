import os
from typing import Optional, Tuple

from dotenv import load_dotenv

from .errors import ConfigError

__version__ = "0.13.0"

DEFAULT_TIMEOUT: float = 90.0
DEFAULT_USER_AGENT = f"twitter-stream-python/{__version__}"

CREDENTIAL_VARS = (
    "TWITTER_CONSUMER_KEY",
    "TWITTER_CONSUMER_SECRET",
    "TWITTER_ACCESS_KEY",
    "TWITTER_ACCESS_SECRET",
)


def load_env(dotenv_path: Optional[str] = None) -> None:
    """Load a `.env` file into the environment without overriding set variables."""
    load_dotenv(dotenv_path)


def read_credentials() -> Tuple[str, str, str, str]:
    missing = [name for name in CREDENTIAL_VARS if not os.getenv(name)]
    if missing:
        raise ConfigError(f"Missing credentials: {', '.join(missing)}")
    consumer_key, consumer_secret, access_key, access_secret = (
        os.environ[name] for name in CREDENTIAL_VARS
    )
    return consumer_key, consumer_secret, access_key, access_secret


def read_timeout() -> Optional[float]:
    """Read timeout in seconds. `0` or `none` disables the timeout."""
    raw = os.getenv("TWITTER_STREAM_TIMEOUT")
    if raw is None or raw == "":
        return DEFAULT_TIMEOUT
    if raw.lower() == "none":
        return None
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigError(f"Invalid TWITTER_STREAM_TIMEOUT: {raw!r}") from None
    if timeout < 0:
        raise ConfigError(f"Invalid TWITTER_STREAM_TIMEOUT: {raw!r}")
    return timeout or None


def read_user_agent() -> str:
    return os.getenv("TWITTER_STREAM_USER_AGENT", DEFAULT_USER_AGENT)

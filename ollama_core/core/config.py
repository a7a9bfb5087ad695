"""Configuration and settings for the model server client."""

import os
from dataclasses import dataclass

from ollama_core.api.constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

DEFAULT_LOG_LEVEL = "WARNING"

# Maximum response/error text length for display
MAX_ERROR_LENGTH = 500


def _normalize_host(host: str) -> str:
    """Turn an OLLAMA_HOST value into a base URL.

    The server accepts bare ``host:port`` values in OLLAMA_HOST, so a
    missing scheme defaults to http.
    """
    host = host.strip().rstrip("/")
    if not host:
        return DEFAULT_BASE_URL
    if "://" not in host:
        host = f"http://{host}"
    return host


@dataclass
class Settings:
    """Client settings detected from the environment.

    Attributes:
        base_url: Server base URL (OLLAMA_HOST)
        timeout: Request timeout in seconds (OLLAMA_TIMEOUT)
        log_level: Root log level name (OLLAMA_LOG_LEVEL)
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_environment(cls) -> "Settings":
        """Create settings from environment variables.

        Returns:
            Settings instance with detected configuration

        Raises:
            ValueError: If OLLAMA_TIMEOUT is not a positive number
        """
        base_url = _normalize_host(os.environ.get("OLLAMA_HOST", DEFAULT_BASE_URL))

        raw_timeout = os.environ.get("OLLAMA_TIMEOUT")
        timeout = DEFAULT_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                msg = f"Invalid OLLAMA_TIMEOUT: {raw_timeout!r}. Expected a number of seconds."
                raise ValueError(msg) from None
            if timeout <= 0:
                msg = f"Invalid OLLAMA_TIMEOUT: {raw_timeout!r}. Must be greater than zero."
                raise ValueError(msg)

        log_level = os.environ.get("OLLAMA_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL

        return cls(base_url=base_url, timeout=timeout, log_level=log_level)

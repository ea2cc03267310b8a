"""Configuration exceptions."""

from typing import Any

from .base import PageWatchError


class ConfigurationError(PageWatchError):
    """A config file, environment variable or override could not be used."""


class InvalidConfigError(ConfigurationError):
    """One setting holds a value that cannot be parsed or is out of range.

    ``key`` is spelled the way the user wrote it (``PAGEWATCH_DATA_DIR`` for
    the environment, ``fetch_timeout_seconds`` for files and overrides).
    """

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(f"{key}={value!r} is not a valid setting: {reason}", details={"key": key})
        self.key = key
        self.value = value
        self.reason = reason

from __future__ import annotations


class BountyCounterError(Exception):
    """Base class for errors raised by bountycounter."""


class LogsDirectoryError(BountyCounterError):
    """The logs directory is missing or cannot be watched."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Logs directory '{path}' unusable: {reason}")
        self.path = path
        self.reason = reason


class ConfigError(BountyCounterError):
    """Configuration file exists but cannot be read or validated."""


class SubmissionError(BountyCounterError):
    """Remote bounty submission failed."""

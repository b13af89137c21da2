"""Exception hierarchy for KadNode.

Every configuration problem is fatal to the process. Parsing code raises
these exceptions and a single top-level handler turns them into a logged
diagnostic and a non-zero exit status.
"""

from __future__ import annotations

from typing import Any


class KadnodeError(Exception):
    """Base exception for all KadNode errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize KadNode error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ConfigurationError(KadnodeError):
    """Configuration errors."""


class ArgumentExpectedError(ConfigurationError):
    """An option that needs a value was given none."""

    def __init__(self, option: str):
        """Initialize with the offending option."""
        super().__init__(f"Argument expected for option: {option}")
        self.option = option


class UnexpectedArgumentError(ConfigurationError):
    """A valueless option was given a value."""

    def __init__(self, option: str):
        """Initialize with the offending option."""
        super().__init__(f"No argument expected for option: {option}")
        self.option = option


class DuplicateOptionError(ConfigurationError):
    """An option that may be set once was set again."""

    def __init__(self, option: str):
        """Initialize with the offending option."""
        super().__init__(f"Option was already set: {option}")
        self.option = option


class InvalidValueError(ConfigurationError):
    """A value failed domain-specific parsing."""


class UnknownOptionError(ConfigurationError):
    """The option is not part of the active catalog."""

    def __init__(self, option: str):
        """Initialize with the offending option."""
        super().__init__(f"Unknown option: {option}")
        self.option = option


class ConfigFileError(ConfigurationError):
    """Configuration file missing, unreadable or not a regular file."""


class ConfigFileSyntaxError(ConfigurationError):
    """Structural violation inside a configuration file."""

    def __init__(self, message: str, line: int):
        """Initialize with the offending line number."""
        super().__init__(message, {"line": line})
        self.line = line

    def __str__(self) -> str:
        """Return the message; the line number is already part of it."""
        return self.message


class TooManyTokensError(ConfigFileSyntaxError):
    """A configuration file line holds more than an option and a value."""

    def __init__(self, line: int):
        """Initialize with the offending line number."""
        super().__init__(f"Too many arguments in line {line}.", line)


class NestedConfigError(ConfigFileSyntaxError):
    """A configuration file tried to include another one."""

    def __init__(self, line: int):
        """Initialize with the offending line number."""
        super().__init__(
            f"Option '--config' not allowed inside a configuration file, line {line}.",
            line,
        )


class ExitRequested(KadnodeError):
    """Parsing stopped on purpose (help, version, key generation).

    Not an error: carries the text to print and the exit status.
    """

    def __init__(self, exit_code: int = 0, output: str | None = None):
        """Initialize exit request."""
        super().__init__(output or "", {})
        self.exit_code = exit_code
        self.output = output

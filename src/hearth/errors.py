"""Errors raised by Hearth.

All errors derive from `HearthError` so entrypoints can catch the whole family
at once. Startup errors (configuration, database) are meant to propagate to the
process entry point; precondition and lookup errors are meant to be handled by
the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from enum import Enum


class HearthError(Exception):
    """Base class for all Hearth errors."""


# --- Configuration ---


class ConfigError(HearthError):
    """Base class for configuration errors."""


class InvalidSettingError(ConfigError):
    """Raised when an environment variable holds a value that cannot be used."""

    def __init__(self, name: str, value: str, reason: str) -> None:
        super().__init__(f"Invalid value for {name} ({value!r}): {reason}")
        self.name = name
        self.value = value


# --- Facade ---


class PreconditionFailedError(HearthError):
    """Raised when a derived object is requested before its inputs are available."""


class RoutesNotSetError(PreconditionFailedError):
    """Raised when a URL generator or matcher is requested without routes."""

    def __init__(self) -> None:
        super().__init__("Routes not set.")


class RequestContextNotSetError(PreconditionFailedError):
    """Raised when a URL generator or matcher is requested without a request context."""

    def __init__(self) -> None:
        super().__init__("Request context not set.")


class CacheNotFoundError(HearthError, KeyError):
    """Raised when no cache is registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Cache ({name}) is not registered")
        self.name = name

    def __str__(self) -> str:
        # KeyError would render the repr of the message
        return str(self.args[0])


class CapabilityNotEnabledError(HearthError):
    """Raised when a dependency belongs to a capability that was not enabled."""

    def __init__(self, capability: Enum) -> None:
        super().__init__(f"Capability ({capability.value}) is not enabled")
        self.capability = capability


# --- Mailer ---


class MailerError(HearthError):
    """Base class for mailer configuration errors."""


class InvalidDsnError(MailerError):
    """Raised when a mailer DSN cannot be parsed."""

    def __init__(self, dsn: str, reason: str) -> None:
        super().__init__(f"Invalid mailer DSN: {reason}")
        self.dsn = dsn


class UnsupportedMailSchemeError(MailerError):
    """Raised when a mailer DSN names a transport that is not available."""

    def __init__(self, scheme: str) -> None:
        super().__init__(f"Unsupported mailer scheme: {scheme!r}")
        self.scheme = scheme

"""Unit tests for the Hearth error hierarchy."""

import pytest

from hearth.bootstrap import Capability
from hearth.errors import (
    CacheNotFoundError,
    CapabilityNotEnabledError,
    HearthError,
    InvalidDsnError,
    PreconditionFailedError,
    RequestContextNotSetError,
    RoutesNotSetError,
    UnsupportedMailSchemeError,
)

# pylint: disable=magic-value-comparison


@pytest.mark.parametrize(
    ("error", "message"),
    [
        (RoutesNotSetError(), "Routes not set."),
        (RequestContextNotSetError(), "Request context not set."),
    ],
)
def test_precondition_errors(error: PreconditionFailedError, message: str):
    """Precondition errors carry a fixed message and share a base class."""
    assert str(error) == message
    assert isinstance(error, PreconditionFailedError)
    assert isinstance(error, HearthError)


def test_cache_not_found_is_a_key_error():
    """CacheNotFoundError names the cache and reads like a normal message."""
    error = CacheNotFoundError("sessions")
    assert isinstance(error, KeyError)
    assert error.name == "sessions"
    assert str(error) == "Cache (sessions) is not registered"


def test_capability_not_enabled_names_capability():
    """The capability is kept on the error and shown in the message."""
    error = CapabilityNotEnabledError(Capability.LOGGING)
    assert error.capability is Capability.LOGGING
    assert "logging" in str(error)


def test_invalid_dsn_hides_dsn_from_message():
    """The DSN may hold a password, so only the reason is shown."""
    error = InvalidDsnError("smtp://user:secret@", "missing host")
    assert "secret" not in str(error)
    assert error.dsn == "smtp://user:secret@"


def test_unsupported_scheme():
    """The scheme is kept on the error."""
    assert UnsupportedMailSchemeError("sendmail").scheme == "sendmail"

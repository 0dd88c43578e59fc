"""Unified exception hierarchy for hapify.

All hapify exceptions inherit from HapifyException so callers can catch a
single base type, or a specific subclass for targeted handling.

Categories:
- RegistrationError: raised synchronously while adding routes; programmer errors
- RequestHandlingError: raised at request time by misuse of the per-request capability
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class HapifyException(Exception):
    """Base exception for all hapify errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "MALFORMED_DESCRIPTOR").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Registration Exceptions
# =============================================================================


class RegistrationError(HapifyException):
    """A route could not be registered.

    The serialized offending descriptor is available as ``descriptor`` and in
    ``context["descriptor"]``.
    """

    default_code: str = "REGISTRATION_ERROR"

    def __init__(self, message: str, descriptor: str = "") -> None:
        super().__init__(message, code=self.default_code, context={"descriptor": descriptor})
        self.descriptor = descriptor


class MalformedDescriptorError(RegistrationError):
    """The route descriptor does not have the required shape."""

    default_code = "MALFORMED_DESCRIPTOR"


class TypeMismatchError(RegistrationError):
    """A route (or batch of routes) was not of the expected container type."""

    default_code = "TYPE_MISMATCH"


class UnsupportedMethodError(RegistrationError):
    """The route's HTTP method has no registration entry point."""

    default_code = "UNSUPPORTED_METHOD"

    def __init__(self, method: str, descriptor: str = "") -> None:
        super().__init__(f"'{method}' not supported", descriptor)
        self.method = method


class MissingSchemaError(RegistrationError):
    """A validation stage was requested without any schema."""

    default_code = "MISSING_SCHEMA"


# =============================================================================
# Request-time Exceptions
# =============================================================================


class RequestHandlingError(HapifyException):
    """Misuse of the per-request API by application code."""


class InvalidFailureObjectError(RequestHandlingError):
    """``respond_with_failure`` received something other than an HttpFailure."""


class CapabilityNotInstalledError(RequestHandlingError):
    """``respond_with_failure`` was called before the capability stage ran."""


class ResponseAlreadyFinalizedError(RequestHandlingError):
    """The response for this request has already been finalized."""

# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
EagerOp Error Hierarchy

Provides error types for the eager operation binding with:
- One exception class per native status code
- Binding-layer errors (NUL bytes, string decoding, released handles)
- Helpful error messages with suggestions and debugging context

Error Categories:
- EagerOpError: Base class for all EagerOp errors
- StatusError: A native call reported a non-OK status
- NulByteError: A name passed to the native side contains a NUL byte
- StringDecodeError: A native string is not valid UTF-8
- ClosedHandleError: Use of a released native resource
- UnsupportedDTypeError: No host representation for a data type
- ValidationError: Python-side argument validation errors
- ConfigurationError: Configuration/setup errors
"""

from typing import Optional

from .core.types import StatusCode


class EagerOpError(Exception):
    """
    Base class for all EagerOp errors.

    Attributes:
        message: Human-readable error message
        suggestions: List of suggestions to fix the error
        context: Optional context dictionary for debugging
    """

    def __init__(
        self,
        message: str,
        suggestions: Optional[list[str]] = None,
        context: Optional[dict] = None,
    ):
        self.message = message
        self.suggestions = suggestions or []
        self.context = context or {}

        full_message = self._format_message()
        super().__init__(full_message)

    def _format_message(self) -> str:
        """Format the error message with suggestions."""
        lines = [self.message]

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for i, suggestion in enumerate(self.suggestions, 1):
                lines.append(f"  {i}. {suggestion}")

        if self.context:
            lines.append("")
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        return "\n".join(lines)


# =============================================================================
# Native status errors
# =============================================================================


class StatusError(EagerOpError):
    """
    A native call finished with a non-OK status.

    The native message is kept verbatim in ``native_message``; ``code``
    holds the decoded status code.
    """

    code: StatusCode = StatusCode.Unknown

    def __init__(
        self,
        native_message: str,
        code: Optional[StatusCode] = None,
        suggestions: Optional[list[str]] = None,
        context: Optional[dict] = None,
    ):
        if code is not None:
            self.code = code
        self.native_message = native_message
        super().__init__(
            message=f"{self.code.name}: {native_message}",
            suggestions=suggestions,
            context=context,
        )


class CancelledError(StatusError):
    code = StatusCode.Cancelled


class UnknownError(StatusError):
    code = StatusCode.Unknown


class InvalidArgumentError(StatusError):
    """Raised for malformed op names, attributes, inputs or devices."""

    code = StatusCode.InvalidArgument


class DeadlineExceededError(StatusError):
    code = StatusCode.DeadlineExceeded


class NotFoundError(StatusError):
    code = StatusCode.NotFound


class AlreadyExistsError(StatusError):
    code = StatusCode.AlreadyExists


class PermissionDeniedError(StatusError):
    code = StatusCode.PermissionDenied


class ResourceExhaustedError(StatusError):
    code = StatusCode.ResourceExhausted


class FailedPreconditionError(StatusError):
    code = StatusCode.FailedPrecondition


class AbortedError(StatusError):
    code = StatusCode.Aborted


class OutOfRangeError(StatusError):
    code = StatusCode.OutOfRange


class UnimplementedError(StatusError):
    code = StatusCode.Unimplemented


class InternalError(StatusError):
    code = StatusCode.Internal


class UnavailableError(StatusError):
    code = StatusCode.Unavailable


class DataLossError(StatusError):
    code = StatusCode.DataLoss


class UnauthenticatedError(StatusError):
    code = StatusCode.Unauthenticated


class UnknownOpError(NotFoundError, InvalidArgumentError):
    """
    Op or function name not registered with the runtime.

    TensorFlow reports this as NotFound; it is also an
    ``InvalidArgumentError`` because the name passed in is malformed input.
    """



_STATUS_ERRORS: dict[StatusCode, type[StatusError]] = {
    cls.code: cls
    for cls in (
        CancelledError,
        UnknownError,
        InvalidArgumentError,
        DeadlineExceededError,
        NotFoundError,
        AlreadyExistsError,
        PermissionDeniedError,
        ResourceExhaustedError,
        FailedPreconditionError,
        AbortedError,
        OutOfRangeError,
        UnimplementedError,
        InternalError,
        UnavailableError,
        DataLossError,
        UnauthenticatedError,
    )
}


def error_from_status(
    code: StatusCode,
    message: str,
    context: Optional[dict] = None,
) -> StatusError:
    """
    Map a native status code to its exception.

    Args:
        code: Non-OK status code.
        message: Message reported by the native library.
        context: Optional debugging context (op name, attribute, ...).

    Returns:
        Instance of the StatusError subclass registered for ``code``.

    Raises:
        ValueError: If ``code`` is ``StatusCode.Ok``.
    """
    if code == StatusCode.Ok:
        raise ValueError("An OK status does not map to an error")
    return _STATUS_ERRORS[code](message, context=context)


# =============================================================================
# Binding-layer errors
# =============================================================================


class NulByteError(InvalidArgumentError):
    """
    A string handed to the native side contains an embedded NUL byte.

    NUL-terminated C strings would silently truncate such a value, so it
    is rejected before the native call.
    """

    def __init__(self, value: str, parameter: Optional[str] = None):
        self.value = value
        context = {"value": repr(value)}
        if parameter:
            context["parameter"] = parameter
        super().__init__(
            f"embedded NUL byte at position {value.find(chr(0))}",
            suggestions=["Remove NUL characters from names passed to the native library"],
            context=context,
        )


class StringDecodeError(EagerOpError):
    """A string returned by the native library is not valid UTF-8."""

    def __init__(self, raw: bytes, source: Optional[str] = None):
        self.raw = raw
        context = {"raw": repr(raw)}
        if source:
            context["source"] = source
        super().__init__(
            message="Native string is not valid UTF-8",
            context=context,
        )


class ClosedHandleError(EagerOpError):
    """
    A native resource was used after it was released.

    Raised for operations on a closed tensor, handle or context, and for
    any use of an op descriptor after ``execute``.
    """

    def __init__(self, kind: str, reason: Optional[str] = None):
        self.kind = kind
        message = f"{kind} has already been released"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            message=message,
            suggestions=[f"Create a new {kind} instead of reusing a released one"],
        )


class UnsupportedDTypeError(EagerOpError):
    """No host (numpy) representation exists for a data type."""

    def __init__(self, dtype: object, operation: Optional[str] = None):
        self.dtype = dtype
        context = {"dtype": str(dtype)}
        if operation:
            context["operation"] = operation
        super().__init__(
            message=f"Data type {dtype} is not supported here",
            suggestions=["Use a fixed-size numeric or bool data type"],
            context=context,
        )


class ValidationError(EagerOpError):
    """
    Input validation error.

    Raised when:
    - Shapes contain invalid dimensions
    - Values have the wrong Python type
    - Buffer sizes do not match tensor sizes
    """

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        expected: Optional[str] = None,
        received: Optional[str] = None,
    ):
        context = {}
        if parameter:
            context["parameter"] = parameter
        if expected:
            context["expected"] = expected
        if received:
            context["received"] = received

        super().__init__(
            message=f"Validation failed: {message}",
            suggestions=["Check the parameter value and type"],
            context=context,
        )


class ConfigurationError(EagerOpError):
    """
    Configuration or setup error.

    Raised when:
    - Invalid configuration parameters
    - Malformed environment variables
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[str] = None,
        suggestions: Optional[list[str]] = None,
    ):
        context = {}
        if config_key:
            context["config_key"] = config_key
        if config_value:
            context["config_value"] = str(config_value)

        super().__init__(
            message=f"Configuration error: {message}",
            suggestions=suggestions
            or [
                "Check configuration parameters",
                "Review the EAGEROP_* environment variables",
            ],
            context=context,
        )


class LibraryNotFoundError(ConfigurationError):
    """The TensorFlow C library could not be loaded or is incomplete."""

    def __init__(self, message: str, candidates: Optional[list[str]] = None):
        self.candidates = candidates or []
        super().__init__(
            message,
            config_key="library_path",
            config_value=", ".join(self.candidates) if self.candidates else None,
            suggestions=[
                "Install TensorFlow: pip install eagerop[tensorflow]",
                "Point EAGEROP_LIBRARY_PATH at libtensorflow.so",
            ],
        )


def format_shape_mismatch(
    expected_elements: int,
    actual_elements: int,
    tensor_name: Optional[str] = None,
) -> ValidationError:
    """Create a ValidationError for an element-count mismatch."""
    msg = f"Element count mismatch: expected {expected_elements}, got {actual_elements}"
    return ValidationError(
        message=msg,
        parameter=tensor_name or "values",
        expected=str(expected_elements),
        received=str(actual_elements),
    )

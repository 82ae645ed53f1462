"""Custom exceptions for pyatagone library."""

from __future__ import annotations

from typing import Any


class AtagOneError(Exception):
    """Base exception for all ATAG One errors."""


class AtagConnectionError(AtagOneError):
    """Exception raised when the thermostat cannot be reached."""


class AtagTimeoutError(AtagOneError):
    """Exception raised when the thermostat does not answer in time."""


class MalformedReplyError(AtagOneError):
    """Exception raised when a reply is not valid JSON or lacks its envelope."""


class InvalidReplyError(AtagOneError):
    """Exception raised for well-formed replies with an unexpected shape."""


class AuthorizationError(AtagOneError):
    """Base exception for authorization state problems.

    These are kept apart from transport errors so callers can decide to
    re-trigger pairing instead of treating the thermostat as offline.
    """


class AuthorizationDeniedError(AuthorizationError):
    """Exception raised when the thermostat has denied this account."""

    def __init__(self, message: str = "Authorization denied. Please re-pair the device.") -> None:
        """Initialize AuthorizationDeniedError.

        Args:
            message: Error message.
        """
        super().__init__(message)


class AuthorizationPendingError(AuthorizationError):
    """Exception raised while the pair request still awaits approval on the device."""

    def __init__(self, message: str = "Authorization pending. Please approve on thermostat.") -> None:
        """Initialize AuthorizationPendingError.

        Args:
            message: Error message.
        """
        super().__init__(message)


class AuthorizationTimeoutError(AuthorizationError):
    """Exception raised when nobody approved the pair request in time.

    Attributes:
        attempts: Number of pair requests that were sent.
    """

    def __init__(self, message: str = "Authorization timeout", attempts: int | None = None) -> None:
        """Initialize AuthorizationTimeoutError.

        Args:
            message: Error message.
            attempts: Optional number of pair requests that were sent.
        """
        super().__init__(message)
        self.attempts = attempts


class InvalidParameterError(AtagOneError):
    """Exception raised for invalid parameter values.

    Attributes:
        parameter_name: Optional name of the invalid parameter.
        value: Optional value that was invalid.
    """

    def __init__(
        self,
        message: str = "",
        parameter_name: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize InvalidParameterError.

        Args:
            message: Error message.
            parameter_name: Optional name of the invalid parameter.
            value: Optional value that was invalid.
        """
        super().__init__(message)
        self.parameter_name = parameter_name
        self.value = value

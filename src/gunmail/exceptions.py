"""Specialized exceptions raised by gunmail.

Exception hierarchy::

    GunmailError
        MailParameterError (None name or value, also ValueError)
        MailConfigurationError (invalid settings, also ValueError)
        MailTransportError (delivery failed)
"""

from __future__ import annotations

from typing import Any


class GunmailError(Exception):
    """Base exception for all gunmail errors.

    Attributes:
        message: Human-readable error message.
        details: Additional error context as key-value pairs.

    Examples:
        >>> raise GunmailError("Something went wrong", details={"field": "to"})
        Traceback (most recent call last):
        ...
        gunmail.exceptions.GunmailError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize GunmailError.

        Args:
            message: Human-readable error message.
            details: Additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class MailParameterError(GunmailError, ValueError):
    """A parameter name or value was ``None``.

    Raised synchronously by the builder before anything is appended,
    so the accumulated parameters are left untouched.

    Attributes:
        name: Parameter name involved (may itself be ``None``).
    """

    def __init__(self, name: str | None, reason: str) -> None:
        """Initialize MailParameterError.

        Args:
            name: Parameter name involved.
            reason: Description of the problem.
        """
        label = "<none>" if name is None else name
        super().__init__(f"Invalid parameter '{label}': {reason}", details={"name": name})
        self.name = name


class MailConfigurationError(GunmailError, ValueError):
    """Configuration is invalid or incomplete."""


class MailTransportError(GunmailError):
    """Raised when delivering a mail to the HTTP API fails.

    Attributes:
        status_code: HTTP status code (if a response was received).
        response_body: Response body (if available).
        retryable: Whether the error is potentially retryable.

    Examples:
        >>> raise MailTransportError("Server error", status_code=502, retryable=True)
        Traceback (most recent call last):
        ...
        gunmail.exceptions.MailTransportError: Server error
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response_body: str | None = None,
        retryable: bool = False,
    ) -> None:
        """Initialize MailTransportError.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code (if available).
            response_body: Response body (if available).
            retryable: Whether the error is potentially retryable.
        """
        super().__init__(
            message,
            details={
                "status_code": status_code,
                "response_body": response_body,
                "retryable": retryable,
            },
        )
        self.status_code = status_code
        self.response_body = response_body
        self.retryable = retryable


__all__ = [
    "GunmailError",
    "MailConfigurationError",
    "MailParameterError",
    "MailTransportError",
]

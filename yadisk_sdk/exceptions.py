"""
Custom exceptions for Yandex.Disk SDK.

This module defines the exception classes raised by the SDK. Transport
failures (connection errors, timeouts, cancellation) are never wrapped and
surface as whatever ``requests``, ``aiohttp`` or ``asyncio`` raise natively.
"""

from typing import Any, Dict, Optional


class YandexDiskError(Exception):
    """Base exception for all Yandex.Disk SDK errors."""

    def __init__(self, message: str, error_code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self):
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class APIError(YandexDiskError):
    """
    Raised when the API answers with an HTTP status code of 400 or above.

    The request may have been formed incorrectly, the resource may not exist,
    the server may be down and so on. The error body is described by a JSON
    object with ``error`` and ``description`` keys; both are optional and
    stay empty when the body could not be decoded.

    https://yandex.com/dev/disk/api/reference/response-objects.html#error
    """

    def __init__(
        self,
        code: str = "",
        description: str = "",
        status_code: Optional[int] = None,
        response: Any = None,
    ):
        self.code = code or ""
        self.description = description or ""
        self.status_code = status_code
        self.response = response
        super().__init__(self._render(), error_code=self.code or None)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        status_code: Optional[int] = None,
        response: Any = None,
    ) -> "APIError":
        """Create APIError from an error response body."""
        code = data.get("error")
        description = data.get("description")
        return cls(
            code=code if isinstance(code, str) else "",
            description=description if isinstance(description, str) else "",
            status_code=status_code,
            response=response,
        )

    @property
    def is_classified(self) -> bool:
        """Whether the server described the error."""
        return bool(self.code or self.description)

    def _render(self) -> str:
        if not self.is_classified:
            return "Yandex.Disk API error."
        return f"Yandex.Disk API error. Code: {self.code}. Description: {self.description}."

    def __str__(self):
        return self.message

    def __repr__(self):
        return f"APIError(code={self.code!r}, description={self.description!r}, status_code={self.status_code!r})"


class InvalidURLError(YandexDiskError, ValueError):
    """Raised when a relative resource path cannot be turned into a request URL."""

    def __init__(self, message: str = "Invalid relative URL", url: str = None, **kwargs):
        super().__init__(message, error_code="INVALID_URL", **kwargs)
        self.url = url


class SerializationError(YandexDiskError, TypeError):
    """Raised when a request body cannot be encoded as JSON."""

    def __init__(self, message: str = "Request body is not JSON serializable", **kwargs):
        super().__init__(message, error_code="SERIALIZATION_ERROR", **kwargs)


class ConfigurationError(YandexDiskError):
    """Raised when SDK configuration is invalid."""

    def __init__(self, message: str = "Invalid configuration", config_key: str = None, **kwargs):
        super().__init__(message, error_code="CONFIG_ERROR", **kwargs)
        self.config_key = config_key

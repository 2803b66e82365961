"""Presentation-level error raised by handlers and dependencies.

An ApiError is rendered into the error envelope by the registered
exception handler. The HTTP status is always derived from the code.
"""

from typing import Any

from midcurve_api.core.enums import ApiErrorCode


class ApiError(Exception):
    """Error carrying an ApiErrorCode, a client-facing message and details.

    Attributes:
        code: Error code from the closed set.
        message: Client-facing message.
        details: Optional JSON-safe details (violations, identifiers, ...).
        headers: Extra response headers.
    """

    def __init__(
        self,
        code: ApiErrorCode,
        message: str,
        details: Any = None,
        *,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details
        self.headers = headers

    @property
    def status_code(self) -> int:
        return self.code.http_status

    def __repr__(self) -> str:
        return f"ApiError(code={self.code.value!r}, message={self.message!r})"

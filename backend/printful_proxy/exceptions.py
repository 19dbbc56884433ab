"""
Printful Proxy - Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the two failure kinds the proxy
       knows about: bad caller input and failed upstream calls.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": message}` with the matching HTTP status code.
Who:   Raised by the proxy service and the Printful client.

Exception Hierarchy:
    PrintfulProxyError (base)
    ├── ValidationError       → 400 Bad Request (caller can fix the input)
    └── UpstreamError         → 500 Internal Server Error
        └── PrintfulAPIError  → 500 (raised by the Printful client)

The router never distinguishes subtypes of UpstreamError: a Printful 404,
a timeout and a malformed body all surface as 500 with the message text.
The status code and Printful reason are kept in `context` for logging only.
"""

from typing import Any, Dict, Optional


class PrintfulProxyError(Exception):
    """
    Base exception for all proxy application errors.

    Attributes:
        message:  Human-readable description, returned to the caller as `error`
        context:  Extra debug info (logged, never returned to the caller)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PrintfulProxyError):
    """
    Raised when caller-supplied input is missing or invalid.

    When:    Missing `id`/`orderId` query parameter, missing body fields,
             body that is not a JSON object, unknown POST action.
    HTTP:    400 Bad Request

    Always raised before the upstream client is touched.

    Example response:
        {"error": "Missing required field(s): recipient, items"}
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UpstreamError(PrintfulProxyError):
    """
    Raised when the call to the Printful gateway fails for any reason.

    When:    Network failure, upstream 4xx/5xx, malformed response, or an
             unexpected exception inside the client.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Printful request failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PrintfulAPIError(UpstreamError):
    """
    Raised by the Printful client for failed HTTP exchanges.

    Attributes:
        status_code: HTTP status returned by Printful (None for transport errors)
        reason:      Printful's `error.reason` string when present (e.g. "NotFound")
    """

    def __init__(
        self,
        message: str = "Printful API request failed",
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        if reason:
            ctx["reason"] = reason
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
        self.reason = reason

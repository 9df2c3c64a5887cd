"""
Error types raised by the SheetChart client.

    from exceptions import ApiError, AuthenticationError

    try:
        api.files.list_files(page=1)
    except AuthenticationError:
        ...  # credential already expired, observer handles navigation
    except ApiError as e:
        logger.warning(f"Listing failed: {e.message}")
"""

from typing import Optional, Any, Dict


class SheetChartError(Exception):
    """Base exception for all client errors"""

    def __init__(
        self,
        message: str,
        code: str = "CLIENT_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class AuthenticationError(SheetChartError):
    """Server rejected the credential (HTTP 401)"""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class ApiError(SheetChartError):
    """Server answered with a non-success status"""

    def __init__(self, status_code: int, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        # what the server said, if it said anything readable
        self.server_message = message
        super().__init__(
            message or f"Request failed with status code {status_code}",
            code="API_ERROR",
            details=details
        )


class TransportError(SheetChartError):
    """Request never produced a response (connection refused, DNS, ...)"""

    def __init__(self, message: str = "Could not reach the server"):
        super().__init__(message, code="TRANSPORT_ERROR")


class UploadValidationError(SheetChartError):
    """File rejected before upload"""

    def __init__(self, message: str, file_name: Optional[str] = None):
        super().__init__(
            message,
            code="UPLOAD_INVALID",
            details={"file_name": file_name} if file_name else None
        )

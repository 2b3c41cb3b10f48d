"""Custom exceptions for massping."""


class MassPingError(Exception):
    """Base exception for all massping errors."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ScanError(MassPingError):
    """Error during a sweep (misuse of a finished queue, executor failure)."""

    pass


class TransportError(MassPingError):
    """Raw socket failure (send, receive or open refused by the OS)."""

    pass


class PermissionError(MassPingError):
    """Insufficient permissions for operation."""

    def __init__(self, operation: str, details: str | None = None):
        message = f"Insufficient permissions for {operation}"
        super().__init__(message, details)
        self.operation = operation


class TimeoutError(MassPingError):
    """Operation timed out."""

    def __init__(self, operation: str, timeout: float):
        message = f"{operation} timed out after {timeout}s"
        super().__init__(message)
        self.operation = operation
        self.timeout = timeout


class ValidationError(MassPingError):
    """Input validation error."""

    pass


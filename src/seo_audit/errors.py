"""Exceptions raised by the page audit pipeline."""

from typing import List, Optional, Tuple


class AuditError(Exception):
    """Base class for every error the audit engine raises."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NoBrowserAvailable(AuditError):
    """Raised when every browser launch strategy has failed."""

    def __init__(self, attempts: Optional[List[Tuple[str, str]]] = None):
        self.attempts = attempts or []
        if self.attempts:
            details = "; ".join(f"{name}: {error}" for name, error in self.attempts)
            message = f"Could not launch any browser ({details})"
        else:
            message = "Could not launch any browser (no launch strategies configured)"
        super().__init__(message)


class NavigationFailed(AuditError):
    """Raised when the target page could not be loaded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Navigation to {url} failed: {reason}")


class NavigationTimeout(NavigationFailed):
    """Raised when the page did not settle within the navigation timeout."""

    def __init__(self, url: str, timeout: float):
        self.timeout = timeout
        super().__init__(url, f"timed out after {timeout:g}s")


class HttpError(NavigationFailed):
    """Raised when the page responded with an HTTP status >= 400."""

    def __init__(self, url: str, status: int):
        self.status = status
        super().__init__(url, f"HTTP {status}")


class OperationTimeout(AuditError):
    """Raised when the whole audit exceeded its overall timeout."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Operation timed out after {timeout:g}s")


class AnalyzerFault(AuditError):
    """Raised inside an analyzer; converted to a zero-score category result."""

    def __init__(self, category: str, message: str):
        self.category = category
        super().__init__(message)


class CleanupFault(AuditError):
    """Describes a failure while releasing browser resources. Logged, never raised."""

    def __init__(self, step: str, error: Exception):
        self.step = step
        self.error = error
        super().__init__(f"Cleanup step '{step}' failed: {error}")

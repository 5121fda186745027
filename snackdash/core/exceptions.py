"""Domain error taxonomy.

Services raise these; ``snackdash.main`` maps them to HTTP responses.
"""
from typing import Optional


class SnackDashError(Exception):
    """Base class for all domain errors."""

    status_code = 500
    default_detail = "Internal error"

    def __init__(self, detail: Optional[str] = None, *, field: Optional[str] = None):
        self.detail = detail or self.default_detail
        self.field = field
        super().__init__(self.detail)


class NotFound(SnackDashError):
    """Unknown tenant, product or order."""
    status_code = 404
    default_detail = "Not found"


class Conflict(SnackDashError):
    """Slug collision or a lost concurrent update."""
    status_code = 409
    default_detail = "Conflict, please try again"


class InvalidTransition(SnackDashError):
    """Requested order status change is not in the transition table."""
    status_code = 409
    default_detail = "Invalid status transition"

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot move order from {_value(current)} to {_value(target)}"
        )


class ValidationError(SnackDashError):
    """Missing or malformed input. Never retried automatically."""
    status_code = 422
    default_detail = "Invalid input"


class Unauthorized(SnackDashError):
    """Failed credential check. Deliberately says nothing about which one."""
    status_code = 401
    default_detail = "Invalid credentials"


class Transient(SnackDashError):
    """Gateway timeout or network failure. Safe to retry later."""
    status_code = 503
    default_detail = "Service temporarily unavailable, please retry"


def _value(status) -> str:
    return getattr(status, "value", str(status))

"""Error taxonomy for the data access layer and its conversion to envelopes.

Data access methods raise the exceptions below internally; the
`api_call` decorator turns them, and anything else that escapes, into an
`ApiFailure` so no exception crosses the public boundary.
"""

import functools
import logging
from typing import Any, Optional

from schemas import ApiError, ApiFailure, ApiSuccess

logger = logging.getLogger(__name__)


class DataAccessError(Exception):
    status = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: Optional[str] = None,
                 status: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status is not None:
            self.status = status
        self.details = details

    def to_error(self) -> ApiError:
        return ApiError(message=self.message, code=self.code, status=self.status, details=self.details)


class NotFound(DataAccessError):
    status = 404
    code = "NOT_FOUND"


class UpstreamUnavailable(DataAccessError):
    """Networked backend unreachable, or not implemented at all."""
    status = 500
    code = "FETCH_ERROR"


def ok(data) -> ApiSuccess:
    return ApiSuccess(data=data)


def fail(message: str, code: Optional[str] = None, status: Optional[int] = 500,
         details: Any = None) -> ApiFailure:
    return ApiFailure(error=ApiError(message=message, code=code, status=status, details=details))


def api_call(failure_message: str, fallback_code: str = "INTERNAL_ERROR"):
    """Wrap an async data access method so it always returns an envelope.

    The wrapped coroutine returns its plain result; `DataAccessError`s keep
    their own message/code/status and any other exception becomes
    `failure_message` with `fallback_code`.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return ok(await func(*args, **kwargs))
            except DataAccessError as e:
                logger.warning(f"{func.__qualname__}: {e.code} {e.message}")
                return ApiFailure(error=e.to_error())
            except Exception as e:
                logger.exception(f"{func.__qualname__} failed: {e}")
                return fail(failure_message, code=fallback_code, status=500)

        return wrapper

    return decorator

"""
Translation of timing errors into HTTP errors.

Domain errors carry user-facing messages already, so the detail is
passed through unchanged; only the status code is decided here.
"""

from fastapi import HTTPException, status

from ..core.timing.models import (
    BoatNotFoundError,
    InvalidConfigurationError,
    NonMonotonicSplitError,
    SessionNotRunningError,
    SessionNotStartedError,
    SessionRunningError,
    SplitLimitReachedError,
    TimingError,
)

STATUS_BY_ERROR: dict[type[TimingError], int] = {
    BoatNotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidConfigurationError: 422,
    NonMonotonicSplitError: 422,
    SessionRunningError: status.HTTP_409_CONFLICT,
    SessionNotRunningError: status.HTTP_409_CONFLICT,
    SplitLimitReachedError: status.HTTP_409_CONFLICT,
    SessionNotStartedError: status.HTTP_409_CONFLICT,
}


def to_http_exception(error: TimingError) -> HTTPException:
    status_code = STATUS_BY_ERROR.get(type(error), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=status_code, detail=str(error))

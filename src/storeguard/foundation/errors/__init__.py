"""Status model and Result type.

- StatusCode/Status: coded outcome of a remote call
- TerminationReason: why the retry loop stopped on a failure
- Result/Ok/Err/StatusOr: value-or-Status return channel
"""

from .result import Err, Ok, Result, StatusOr
from .status import (
    Status,
    StatusCode,
    StatusError,
    TerminationReason,
    status_from_exception,
    value_or_raise,
)

__all__ = [
    # Status
    "Status", "StatusCode", "StatusError", "TerminationReason",
    "status_from_exception", "value_or_raise",
    # Result
    "Result", "Ok", "Err", "StatusOr",
]

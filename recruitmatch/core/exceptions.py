"""
Exception types raised by the RecruitMatch core.

NotFound, Forbidden and ValidationError describe expected conditions that
the HTTP layer maps to 404, 403 and 400. StorageError wraps persistence
failures and is reported to clients as a generic server error.
"""

from typing import Any, Optional


class RecruitMatchError(Exception):
    """Base class for all RecruitMatch errors."""

    status_code: int = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class NotFound(RecruitMatchError):
    """A resume, job or match id did not resolve."""

    status_code = 404


class Forbidden(RecruitMatchError):
    """The caller may not act on the requested resource."""

    status_code = 403


class ValidationError(RecruitMatchError):
    """The request was malformed (missing or invalid ids)."""

    status_code = 400


class StorageError(RecruitMatchError):
    """The persistence layer failed."""

    status_code = 500

    def __init__(self, message: str = "", cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class AutoMatchAborted(StorageError):
    """
    A batch auto-match stopped part way through.

    Upserts applied before the failure stay committed; they are listed in
    ``partial_results`` so callers can report what was done.
    """

    def __init__(
        self,
        message: str,
        partial_results: list[Any],
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, cause)
        self.partial_results = partial_results

    @property
    def applied_count(self) -> int:
        return len(self.partial_results)

"""
PIM Activate - Error taxonomy
------------------------------
Every failure carries the step that raised it so the command line can
report one contextual line per run.
"""

from __future__ import annotations


class PimActivationError(Exception):
    """Base class for every failure of an activation run."""

    def __init__(self, message: str, step: str = "activation") -> None:
        super().__init__(message)
        self.step = step


class ValidationError(PimActivationError):
    """Input rejected before any remote call."""

    def __init__(self, message: str) -> None:
        super().__init__(message, step="validate")


class AuthenticationError(PimActivationError):
    """Sign-in or token acquisition failed."""

    def __init__(self, message: str) -> None:
        super().__init__(message, step="authenticate")


class PimLookupError(PimActivationError, LookupError):
    """
    A user, resource or role-definition lookup did not yield exactly one record.

    ``kind`` is one of ``not_found``, ``ambiguous`` or ``request_failed``.
    """

    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"
    REQUEST_FAILED = "request_failed"

    def __init__(self, message: str, step: str, kind: str, count: int | None = None) -> None:
        super().__init__(message, step=step)
        self.kind = kind
        self.count = count


class SubmissionError(PimActivationError):
    """The activation request was rejected or could not be sent."""

    def __init__(self, message: str) -> None:
        super().__init__(message, step="submit")

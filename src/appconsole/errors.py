"""
Console error types.

Validation and policy errors are raised to the form/command boundary and
rendered inline; backend failures propagate as ConsoleError.
"""

from typing import Any, Optional


class ConsoleError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class AuthError(ConsoleError):
    def __init__(self, message: str, code: str = "auth_error"):
        super().__init__(code, message)


class ConnectionError(ConsoleError):
    def __init__(self, message: str):
        super().__init__("connection_error", message)


class ValidationError(ConsoleError):
    """A form field failed a local rule (name length, email, password...)."""

    def __init__(self, message: str, field: Optional[str] = None, code: str = "validation_error"):
        super().__init__(code, message, {"field": field} if field else None)
        self.field = field


class InvalidFormat(ValidationError):
    """Version text is not exactly three dot-separated unsigned integers."""

    def __init__(self, value: str, field: Optional[str] = None):
        super().__init__(
            f"invalid version {value!r}: expected x.y.z, e.g. 1.2.3",
            field=field,
            code="invalid_format",
        )
        self.value = value


class ChangelogError(ValidationError):
    def __init__(self, message: str):
        super().__init__(message, field="changelogMd", code="changelog_error")


class ReleaseRejected(ConsoleError):
    """Candidate parses but is not a strict upgrade of the baseline."""

    def __init__(self, candidate: str, baseline: str, message: str):
        super().__init__("release_rejected", message, {"candidate": candidate, "baseline": baseline})
        self.candidate = candidate
        self.baseline = baseline


class DowngradeRejected(ReleaseRejected):
    def __init__(self, candidate: str, baseline: str):
        super().__init__(candidate, baseline, f"{candidate} is lower than the current version {baseline}")


class EqualRejected(ReleaseRejected):
    def __init__(self, candidate: str, baseline: str):
        super().__init__(candidate, baseline, f"{candidate} is already the current version")


class SessionResolutionFailure(ConsoleError):
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__("session_resolution_failure", message)
        self.cause = cause

"""
appconsole — administration console for applications, releases and member tiers.

Async REST client and `appconsole` CLI for the /api/v1 backend.
"""

from appconsole.client import AdminConsole, AsyncAdminConsole
from appconsole.auth import Auth
from appconsole.apps import ApplicationsAPI
from appconsole.members import MembersAPI
from appconsole.system import SystemAPI
from appconsole.gate import MountScope, SessionGate, SessionState, View
from appconsole.session_store import FileSessionStore, MemorySessionStore, SessionStore
from appconsole.versioning import (
    Version,
    VersionComparison,
    check_release,
    classify,
    compare,
    is_release_allowed,
    parse,
)
from appconsole.errors import (
    ConsoleError,
    AuthError,
    ConnectionError,
    ValidationError,
    InvalidFormat,
    ChangelogError,
    ReleaseRejected,
    DowngradeRejected,
    EqualRejected,
    SessionResolutionFailure,
)

__version__ = "0.1.0"
__all__ = [
    "AdminConsole",
    "AsyncAdminConsole",
    "Auth",
    "ApplicationsAPI",
    "MembersAPI",
    "SystemAPI",
    "MountScope",
    "SessionGate",
    "SessionState",
    "View",
    "FileSessionStore",
    "MemorySessionStore",
    "SessionStore",
    "Version",
    "VersionComparison",
    "check_release",
    "classify",
    "compare",
    "is_release_allowed",
    "parse",
    "ConsoleError",
    "AuthError",
    "ConnectionError",
    "ValidationError",
    "InvalidFormat",
    "ChangelogError",
    "ReleaseRejected",
    "DowngradeRejected",
    "EqualRejected",
    "SessionResolutionFailure",
]

"""
Browser infrastructure for page audits.

Provides the session manager that acquires and releases the browser
used by one audit.
"""

from seo_audit.infrastructure.browser_session import (
    BrowserSession,
    LaunchStrategy,
    LocalBrowserStrategy,
    ManagedBrowserStrategy,
    RemoteBrowserStrategy,
    SessionManager,
)

__all__ = [
    "BrowserSession",
    "LaunchStrategy",
    "LocalBrowserStrategy",
    "ManagedBrowserStrategy",
    "RemoteBrowserStrategy",
    "SessionManager",
]

"""
Browser session management.

Acquires one controllable browser for the duration of a single audit and
releases it afterwards. Acquisition walks an ordered list of launch
strategies until one succeeds:

- local: a Chrome/Chromium binary installed at a well-known OS-specific path
- managed: the browser build downloaded and managed by Playwright
- remote: a hosted browser (Browserless) reached over CDP with a token

Every strategy returns the same BrowserSession wrapper, so the rest of the
pipeline never needs to know where the browser runs.
"""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from playwright.async_api import async_playwright

from seo_audit.browser_config import BrowserConfig, local_browser_paths
from seo_audit.errors import CleanupFault, NoBrowserAvailable
from seo_audit.models import ProbeResponse

logger = logging.getLogger(__name__)


async def _start_playwright():
    """Start a Playwright driver, shutting it down again if startup is interrupted."""
    manager = async_playwright()
    try:
        return await manager.start()
    except BaseException:
        # The driver process may already be running when cancellation lands
        try:
            await manager.__aexit__(None, None, None)
        except Exception as e:
            logger.debug(f"Error stopping partially started playwright: {e}")
        raise


class BrowserSession:
    """
    Handle to one browser owned by exactly one audit.

    Pages are created in a single isolated context configured with the
    desktop viewport, JavaScript enabled and, optionally, request blocking
    for heavy resource types. ``close()`` is idempotent and never raises.
    """

    def __init__(
        self,
        browser: Any,
        playwright: Any = None,
        config: Optional[BrowserConfig] = None,
        remote: bool = False,
        strategy: str = "unknown",
    ):
        """
        Initialize the session wrapper.

        Args:
            browser: Playwright Browser (launched or connected)
            playwright: Playwright driver to stop on close, if owned
            config: Browser settings for pages created in this session
            remote: True when connected to a remote browser
            strategy: Name of the launch strategy that produced the browser
        """
        self._browser = browser
        self._playwright = playwright
        self.config = config or BrowserConfig()
        self.remote = remote
        self.strategy = strategy

        self._context = None
        self._pages: List[Any] = []
        self._closed = False
        self._close_lock = asyncio.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    async def _ensure_context(self):
        if self._closed:
            raise RuntimeError("Browser session is closed")

        if self._context is None:
            context_options: Dict[str, Any] = {
                "viewport": self.config.viewport,
                "java_script_enabled": True,
                "ignore_https_errors": True,
            }
            if self.config.user_agent:
                context_options["user_agent"] = self.config.user_agent

            self._context = await self._browser.new_context(**context_options)
            self._context.set_default_timeout(self.config.timeout)

        return self._context

    async def new_page(
        self,
        viewport: Optional[Dict[str, int]] = None,
        block_resources: Optional[Sequence[str]] = None,
    ):
        """
        Open a new page in this session.

        Args:
            viewport: Override the context viewport for this page
            block_resources: Resource types to abort; defaults to config.block_resources

        Returns:
            Playwright Page
        """
        context = await self._ensure_context()
        page = await context.new_page()
        self._pages.append(page)

        if viewport:
            await page.set_viewport_size(viewport)

        blocked = set(self.config.block_resources if block_resources is None else block_resources)
        if blocked:
            async def _route(route):
                if route.request.resource_type in blocked:
                    await route.abort()
                else:
                    await route.continue_()

            await page.route("**/*", _route)
            logger.debug(f"Blocking resource types: {sorted(blocked)}")

        return page

    async def close_page(self, page) -> None:
        """Close a page opened by this session (best effort)."""
        if page in self._pages:
            self._pages.remove(page)
        try:
            await page.close()
        except Exception as e:
            logger.warning(CleanupFault("close page", e).message)

    async def probe(self, url: str, method: str = "HEAD", timeout: float = 5.0) -> ProbeResponse:
        """
        Issue a lightweight request through the session's network stack.

        Shares cookies and proxy settings with the audited page.

        Args:
            url: Absolute URL to request
            method: HTTP method, HEAD by default
            timeout: Request timeout in seconds

        Returns:
            ProbeResponse with status and headers
        """
        context = await self._ensure_context()
        response = await context.request.fetch(
            url,
            method=method,
            timeout=timeout * 1000,
            fail_on_status_code=False,
        )
        try:
            return ProbeResponse(status=response.status, headers=dict(response.headers))
        finally:
            await response.dispose()

    async def close(self) -> None:
        """
        Release the browser.

        Closes all open pages first, then disconnects from a remote browser
        or terminates a local one, then stops the Playwright driver. Each
        step is best effort: failures are logged and never raised. Calling
        close() again is a no-op.
        """
        async with self._close_lock:
            if self._closed:
                logger.debug("Browser session already closed")
                return
            self._closed = True

            for page in list(self._pages):
                try:
                    await page.close()
                except Exception as e:
                    logger.warning(CleanupFault("close page", e).message)
            self._pages.clear()

            if self._context is not None:
                try:
                    await self._context.close()
                except Exception as e:
                    logger.warning(CleanupFault("close context", e).message)
                self._context = None

            step = "disconnect remote browser" if self.remote else "terminate local browser"
            try:
                # Playwright disconnects connected browsers and kills launched ones
                await self._browser.close()
            except Exception as e:
                logger.warning(CleanupFault(step, e).message)

            if self._playwright is not None:
                try:
                    await self._playwright.stop()
                except Exception as e:
                    logger.warning(CleanupFault("stop playwright", e).message)
                self._playwright = None

            logger.info(f"Browser session closed ({self.strategy})")


class LaunchStrategy(ABC):
    """One way of obtaining a browser."""

    name = "strategy"

    def __init__(self, config: Optional[BrowserConfig] = None):
        self.config = config or BrowserConfig()

    @abstractmethod
    async def launch(self) -> BrowserSession:
        """Return a ready BrowserSession or raise."""

    async def _launch_with(self, connect, remote: bool = False) -> BrowserSession:
        playwright = None
        try:
            playwright = await _start_playwright()
            browser = await connect(playwright)
        except BaseException:
            # Includes cancellation by the audit timeout
            if playwright is not None:
                try:
                    await playwright.stop()
                except Exception as e:
                    logger.debug(f"Error stopping playwright after failed launch: {e}")
            raise

        return BrowserSession(
            browser,
            playwright=playwright,
            config=self.config,
            remote=remote,
            strategy=self.name,
        )


class LocalBrowserStrategy(LaunchStrategy):
    """Launch a Chrome/Chromium installed on this machine."""

    name = "local"

    def __init__(self, config: Optional[BrowserConfig] = None, paths: Optional[List[str]] = None):
        super().__init__(config)
        self.paths = local_browser_paths() if paths is None else list(paths)

    def find_executable(self) -> Optional[str]:
        for path in self.paths:
            if os.path.isfile(path):
                return path
        return None

    async def launch(self) -> BrowserSession:
        executable = self.find_executable()
        if executable is None:
            raise FileNotFoundError(
                f"No local browser found (checked {len(self.paths)} path(s))"
            )

        logger.info(f"Launching local browser: {executable}")
        return await self._launch_with(
            lambda playwright: playwright.chromium.launch(
                executable_path=executable,
                headless=self.config.headless,
                args=self.config.launch_args,
            )
        )


class ManagedBrowserStrategy(LaunchStrategy):
    """Launch the Chromium build downloaded by `playwright install`."""

    name = "managed"

    async def launch(self) -> BrowserSession:
        logger.info(f"Launching Playwright-managed Chromium (headless={self.config.headless})")
        return await self._launch_with(
            lambda playwright: playwright.chromium.launch(
                headless=self.config.headless,
                args=self.config.launch_args,
            )
        )


class RemoteBrowserStrategy(LaunchStrategy):
    """Connect to a hosted browser over the Chrome DevTools Protocol."""

    name = "remote"

    def __init__(self, endpoint: Optional[str], config: Optional[BrowserConfig] = None):
        super().__init__(config)
        self.endpoint = endpoint

    async def launch(self) -> BrowserSession:
        if not self.endpoint:
            raise RuntimeError("No remote browser endpoint configured")

        # Never log the token-bearing endpoint
        logger.info("Connecting to remote browser")
        return await self._launch_with(
            lambda playwright: playwright.chromium.connect_over_cdp(
                self.endpoint,
                timeout=self.config.timeout,
            ),
            remote=True,
        )


class SessionManager:
    """
    Acquires a BrowserSession by trying launch strategies in order.

    Individual strategy failures are logged and swallowed; only when every
    strategy has failed is NoBrowserAvailable raised, carrying each attempt.
    """

    def __init__(self, strategies: Sequence[LaunchStrategy]):
        self.strategies = list(strategies)

    @classmethod
    def from_config(cls, config) -> "SessionManager":
        """
        Build the default strategy chain for an AuditConfig.

        The remote strategy is only included when a token is configured.
        """
        browser_config = config.browser_config()
        strategies: List[LaunchStrategy] = [
            LocalBrowserStrategy(browser_config),
            ManagedBrowserStrategy(browser_config),
        ]
        if config.remote_endpoint:
            strategies.append(RemoteBrowserStrategy(config.remote_endpoint, browser_config))
        return cls(strategies)

    async def acquire(self) -> BrowserSession:
        """
        Return the first session any strategy can provide.

        Raises:
            NoBrowserAvailable: If every strategy failed
        """
        attempts = []

        for strategy in self.strategies:
            try:
                session = await strategy.launch()
            except Exception as e:
                error = str(e) or type(e).__name__
                logger.warning(f"Browser strategy '{strategy.name}' failed: {error}")
                attempts.append((strategy.name, error))
                continue

            logger.info(f"Browser acquired via '{strategy.name}' strategy")
            return session

        raise NoBrowserAvailable(attempts)

"""
Page navigation for audits.

Drives a BrowserSession to the target URL, waits for the network to go
quiet, and captures everything the analyzers need: the rendered DOM (as a
BeautifulSoup document), the post-redirect URL, the response status and
headers, and the list of network responses observed during the load.
"""
import asyncio
import logging
import time
from typing import List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from seo_audit.browser_config import BrowserConfig
from seo_audit.errors import HttpError, NavigationFailed, NavigationTimeout
from seo_audit.models import PageSnapshot, ResourceTiming

logger = logging.getLogger(__name__)


def _content_length(headers) -> int:
    value = headers.get("content-length") if headers else None
    try:
        return int(value) if value else 0
    except (TypeError, ValueError):
        return 0


def record_response(response) -> ResourceTiming:
    """Convert a Playwright Response into a ResourceTiming entry."""
    request = response.request
    try:
        timing = dict(request.timing or {})
    except Exception:
        timing = {}

    return ResourceTiming(
        url=response.url,
        type=request.resource_type or "other",
        status=response.status,
        size=_content_length(response.headers),
        timing=timing,
    )


class PageNavigator:
    """
    Loads a single page in a BrowserSession.

    Usage:
        navigator = PageNavigator(config)
        snapshot = await navigator.load(session, "https://example.com")

    The live page stays open (owned by the session) so analyzers can run
    in-browser measurements against it.
    """

    def __init__(self, config: Optional[BrowserConfig] = None):
        self._config = config or BrowserConfig()

    async def load(
        self,
        session,
        url: str,
        nav_timeout: Optional[float] = None,
    ) -> PageSnapshot:
        """
        Navigate to a URL and snapshot the rendered page.

        Args:
            session: BrowserSession that owns the page
            url: URL to load
            nav_timeout: Navigation timeout in seconds (defaults to config.timeout)

        Returns:
            PageSnapshot of the loaded page

        Raises:
            NavigationTimeout: If the page did not settle in time
            HttpError: If the page responded with status >= 400
            NavigationFailed: For any other navigation error
        """
        timeout = nav_timeout if nav_timeout is not None else self._config.timeout / 1000
        resources: List[ResourceTiming] = []
        start_time = time.time()

        page = await session.new_page()

        def _on_response(response):
            try:
                resources.append(record_response(response))
            except Exception as e:
                logger.debug(f"Could not record response {getattr(response, 'url', '?')}: {e}")

        page.on("response", _on_response)

        logger.info(f"Navigating to {url}")

        try:
            response = await page.goto(
                url,
                wait_until=self._config.wait_until,
                timeout=timeout * 1000,
            )
        except (PlaywrightTimeoutError, asyncio.TimeoutError):
            raise NavigationTimeout(url, timeout)
        except PlaywrightError as e:
            raise NavigationFailed(url, e.message.splitlines()[0] if e.message else str(e))

        if response is None:
            raise NavigationFailed(url, "no response received")

        status = response.status
        if status >= 400:
            logger.warning(f"{url} responded with HTTP {status}")
            raise HttpError(url, status)

        html = await page.content()
        final_url = page.url or url
        headers = dict(response.headers)

        logger.info(
            f"Loaded {final_url} (status={status}, resources={len(resources)}, "
            f"time={time.time() - start_time:.2f}s)"
        )

        return PageSnapshot.from_html(
            html,
            final_url=final_url,
            url=url,
            status=status,
            headers=headers,
            resources=list(resources),
            page=page,
            session=session,
        )

"""
Browser configuration for Playwright-based page audits.

Settings for the browser that one audit launches or connects to: launch
flags, desktop and mobile viewports, navigation wait state and request
blocking, validated by Pydantic. DEFAULT_CONFIG and FAST_CONFIG cover the
two usual setups.
"""
import platform
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from seo_audit.constants import BLOCKABLE_RESOURCE_TYPES, MOBILE_VIEWPORT


# Flags that keep Chromium stable in containers and serverless sandboxes
DEFAULT_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]

# Well-known locations of a locally installed Chrome/Chromium, per OS
LOCAL_BROWSER_PATHS: Dict[str, List[str]] = {
    "Windows": [
        "C:\\Program Files\\Google\\Chrome\\Application\\chrome.exe",
        "C:\\Program Files (x86)\\Google\\Chrome\\Application\\chrome.exe",
        "C:\\Program Files\\Microsoft\\Edge\\Application\\msedge.exe",
    ],
    "Darwin": [
        "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
        "/Applications/Chromium.app/Contents/MacOS/Chromium",
        "/Applications/Microsoft Edge.app/Contents/MacOS/Microsoft Edge",
    ],
    "Linux": [
        "/usr/bin/google-chrome",
        "/usr/bin/google-chrome-stable",
        "/usr/bin/chromium",
        "/usr/bin/chromium-browser",
        "/snap/bin/chromium",
    ],
}


def local_browser_paths(system: Optional[str] = None) -> List[str]:
    """Candidate browser executables for the given (or current) OS."""
    return list(LOCAL_BROWSER_PATHS.get(system or platform.system(), []))


class BrowserConfig(BaseModel):
    """
    Configuration for the browser session used by one audit.

    All fields are validated by Pydantic to ensure type safety and valid values.
    """

    headless: bool = Field(
        default=True,
        description="Launch without a visible window"
    )

    viewport_width: int = Field(default=1280, ge=320, le=3840)
    viewport_height: int = Field(default=800, ge=320, le=2160)

    mobile_viewport_width: int = Field(default=MOBILE_VIEWPORT["width"], ge=240, le=1024)
    mobile_viewport_height: int = Field(default=MOBILE_VIEWPORT["height"], ge=320, le=2048)

    timeout: int = Field(
        default=30000,
        description="Navigation timeout in milliseconds",
        ge=1000,
        le=300000
    )

    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = Field(
        default="networkidle",
        description="Load state that ends navigation"
    )

    block_resources: List[str] = Field(
        default_factory=list,
        description="Resource types to abort during navigation (e.g., 'image', 'font', 'stylesheet')"
    )

    launch_args: List[str] = Field(
        default_factory=lambda: list(DEFAULT_LAUNCH_ARGS),
        description="Browser launch arguments"
    )

    user_agent: Optional[str] = Field(
        default=None,
        description="Custom user agent. None keeps the browser default."
    )

    class Config:
        """Pydantic model configuration."""
        frozen = False
        validate_assignment = True

    @property
    def viewport(self) -> Dict[str, int]:
        return {"width": self.viewport_width, "height": self.viewport_height}

    @property
    def mobile_viewport(self) -> Dict[str, int]:
        return {"width": self.mobile_viewport_width, "height": self.mobile_viewport_height}


# --- Pre-configured Instances for Common Use Cases ---

DEFAULT_CONFIG = BrowserConfig()
"""
Default configuration: desktop viewport, full rendering, network-idle wait.
"""

FAST_CONFIG = BrowserConfig(
    headless=True,
    wait_until="networkidle",
    timeout=15000,
    block_resources=list(BLOCKABLE_RESOURCE_TYPES),
)
"""
Request-blocking preset for slow or heavy pages.

Blocks heavy resources so expensive pages settle sooner. Image sizes and
page weight are under-reported with this configuration.
"""

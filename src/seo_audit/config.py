from dotenv import load_dotenv
from dataclasses import dataclass
from typing import Optional
import logging
import os

from seo_audit.browser_config import BrowserConfig
from seo_audit.constants import (
    BLOCKABLE_RESOURCE_TYPES,
    DEFAULT_ANALYSIS_TIMEOUT_SECONDS,
    DEFAULT_BROWSERLESS_ENDPOINT,
    DEFAULT_MAX_CONCURRENT_PROBES,
    DEFAULT_NAVIGATION_TIMEOUT_SECONDS,
    DEFAULT_PROBE_TIMEOUT_SECONDS,
    MAX_NAVIGATION_TIMEOUT_SECONDS,
    MIN_NAVIGATION_TIMEOUT_SECONDS,
)

load_dotenv()  # Loads variables from .env file

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_number(name: str, default, cast, minimum=None, maximum=None):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        number = cast(value)
    except ValueError:
        logger.warning(f"Ignoring invalid value for {name}: {value!r}")
        return default  # Keep default if conversion fails
    if (minimum is not None and number < minimum) or (maximum is not None and number > maximum):
        logger.warning(f"Ignoring out-of-range value for {name}: {value!r} (allowed {minimum}-{maximum})")
        return default
    return number


@dataclass
class AuditConfig:
    """Configuration for one or more page audits.

    Components never read the environment themselves; build an AuditConfig
    (directly or with from_env) and pass it to PageAuditor / run_audit.
    """
    analysis_timeout: float = DEFAULT_ANALYSIS_TIMEOUT_SECONDS
    navigation_timeout: float = DEFAULT_NAVIGATION_TIMEOUT_SECONDS
    fallback_to_mock: bool = False
    use_mock: bool = False
    block_resources: bool = False
    browserless_token: Optional[str] = None
    browserless_endpoint: str = DEFAULT_BROWSERLESS_ENDPOINT
    headless: bool = True
    user_agent: Optional[str] = None
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS
    max_concurrent_probes: int = DEFAULT_MAX_CONCURRENT_PROBES
    general_advisories: bool = True
    log_level: str = "INFO"

    def __post_init__(self):
        if not MIN_NAVIGATION_TIMEOUT_SECONDS <= self.navigation_timeout <= MAX_NAVIGATION_TIMEOUT_SECONDS:
            raise ValueError(
                f"navigation_timeout must be between {MIN_NAVIGATION_TIMEOUT_SECONDS:g} and "
                f"{MAX_NAVIGATION_TIMEOUT_SECONDS:g} seconds, got {self.navigation_timeout}"
            )

    @classmethod
    def from_env(cls) -> "AuditConfig":
        """Load configuration from environment variables.

        Returns:
            AuditConfig: Configuration instance with values from environment
        """
        return cls(
            analysis_timeout=_env_number(
                "AUDIT_TIMEOUT_SECONDS", DEFAULT_ANALYSIS_TIMEOUT_SECONDS, float
            ),
            navigation_timeout=_env_number(
                "NAVIGATION_TIMEOUT_SECONDS", DEFAULT_NAVIGATION_TIMEOUT_SECONDS, float,
                MIN_NAVIGATION_TIMEOUT_SECONDS, MAX_NAVIGATION_TIMEOUT_SECONDS,
            ),
            fallback_to_mock=_env_bool("FALLBACK_TO_MOCK", False),
            use_mock=_env_bool("USE_MOCK_SEO", False),
            block_resources=_env_bool("BLOCK_RESOURCES", False),
            browserless_token=os.getenv("BROWSERLESS_TOKEN") or None,
            browserless_endpoint=os.getenv("BROWSERLESS_ENDPOINT", DEFAULT_BROWSERLESS_ENDPOINT),
            headless=_env_bool("HEADLESS", True),
            user_agent=os.getenv("USER_AGENT") or None,
            probe_timeout=_env_number(
                "PROBE_TIMEOUT_SECONDS", DEFAULT_PROBE_TIMEOUT_SECONDS, float
            ),
            max_concurrent_probes=_env_number(
                "MAX_CONCURRENT_PROBES", DEFAULT_MAX_CONCURRENT_PROBES, int
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @property
    def remote_endpoint(self) -> Optional[str]:
        """WebSocket endpoint of the remote browser, None without a token."""
        if not self.browserless_token:
            return None
        return self.browserless_endpoint.format(token=self.browserless_token)

    def browser_config(self) -> BrowserConfig:
        """Derive the browser launch/page settings for this configuration."""
        return BrowserConfig(
            headless=self.headless,
            timeout=int(self.navigation_timeout * 1000),
            block_resources=list(BLOCKABLE_RESOURCE_TYPES) if self.block_resources else [],
            user_agent=self.user_agent,
        )

"""Runtime configuration.

One ``Settings`` value is built per process (usually from the environment) and
handed to every adapter at construction. It is frozen: adapters keep a copy and
never mutate shared state.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

# Needed to run Chromium headless inside containers and CI sandboxes.
DEFAULT_BROWSER_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
)


@dataclass(frozen=True)
class Settings:
    """Configuration shared by all source adapters."""

    congress_api_key: str | None = None
    regulations_gov_api_key: str | None = None

    # API adapters
    http_timeout: float = 30.0
    max_attempts: int = 3
    retry_initial_backoff: float = 0.5
    retry_max_backoff: float = 4.0
    api_user_agent: str = "legal-research/0.1 (legal research aggregator)"

    # Scraping adapters
    use_browser: bool = True
    headless: bool = True
    delay_min_ms: int = 1000
    delay_max_ms: int = 3000
    navigation_timeout_ms: int = 30000
    selector_timeout_ms: int = 15000
    user_agent: str = DEFAULT_USER_AGENT
    viewport_width: int = 1280
    viewport_height: int = 720
    browser_args: tuple[str, ...] = field(default=DEFAULT_BROWSER_ARGS)

    def __post_init__(self) -> None:
        if self.delay_min_ms < 0 or self.delay_max_ms < self.delay_min_ms:
            raise ValueError(
                f"invalid delay window [{self.delay_min_ms}, {self.delay_max_ms}] ms"
            )
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    @property
    def scrape_budget_seconds(self) -> float:
        """Worst case for one scrape: longest delay, navigation and the container wait."""
        return (self.delay_max_ms + self.navigation_timeout_ms + self.selector_timeout_ms) / 1000

    @classmethod
    def from_env(cls, dotenv: bool = True) -> Settings:
        """Build settings from ``LEGAL_*`` environment variables.

        API keys use the names the upstream services document
        (``CONGRESS_API_KEY``, ``REGULATIONS_GOV_API_KEY``). Empty strings are
        treated as unset.
        """
        if dotenv:
            load_dotenv()

        defaults = cls()
        return cls(
            congress_api_key=os.getenv("CONGRESS_API_KEY") or None,
            regulations_gov_api_key=os.getenv("REGULATIONS_GOV_API_KEY") or None,
            http_timeout=float(os.getenv("LEGAL_HTTP_TIMEOUT", defaults.http_timeout)),
            max_attempts=int(os.getenv("LEGAL_MAX_ATTEMPTS", defaults.max_attempts)),
            use_browser=_env_flag("LEGAL_USE_BROWSER", defaults.use_browser),
            headless=_env_flag("LEGAL_HEADLESS", defaults.headless),
            delay_min_ms=int(os.getenv("LEGAL_DELAY_MIN_MS", defaults.delay_min_ms)),
            delay_max_ms=int(os.getenv("LEGAL_DELAY_MAX_MS", defaults.delay_max_ms)),
            navigation_timeout_ms=int(
                os.getenv("LEGAL_NAVIGATION_TIMEOUT_MS", defaults.navigation_timeout_ms)
            ),
            selector_timeout_ms=int(
                os.getenv("LEGAL_SELECTOR_TIMEOUT_MS", defaults.selector_timeout_ms)
            ),
            user_agent=os.getenv("LEGAL_USER_AGENT", defaults.user_agent),
        )


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}

"""Application configuration loader."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, List

CONFIG_ENV_VAR = "APP_CONFIG_FILE"
CONFIG_PATH = Path(__file__).resolve().parents[1] / "config.toml"

WAIT_UNTIL_OPTIONS = {"load", "domcontentloaded", "networkidle", "commit"}

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--disable-gpu",
]


class Config:
    """Service configuration loaded from a TOML file.

    Environment variables override the values that usually differ per
    deployment (listen address, log level, headless mode).
    """

    def __init__(self, data: Dict[str, Any]) -> None:
        """Initialise configuration values from parsed TOML data.

        Args:
            data: Nested dictionary representation of the TOML file.
        """
        server = data.get("server", {})
        browser = data.get("browser", {})
        viewport = browser.get("viewport", {})
        navigation = data.get("navigation", {})
        extraction = data.get("extraction", {})
        logging_settings = data.get("logging", {})

        self.HOST: str = os.getenv("HOST", server.get("host", "0.0.0.0"))
        self.PORT: int = int(os.getenv("PORT", server.get("port", 3000)))
        self.CORS_ORIGINS: List[str] = [str(origin) for origin in server.get("cors_origins", ["*"])]

        self.BROWSER_HEADLESS: bool = self._parse_bool(os.getenv("BROWSER_HEADLESS", browser.get("headless", True)))
        self.BROWSER_LAUNCH_ARGS: List[str] = list(browser.get("launch_args", DEFAULT_LAUNCH_ARGS))
        self.BROWSER_LAUNCH_ON_STARTUP: bool = self._parse_bool(browser.get("launch_on_startup", True))
        self.BROWSER_USER_AGENT: str = browser.get("user_agent", DEFAULT_USER_AGENT)
        self.VIEWPORT_WIDTH: int = int(viewport.get("width", 1920))
        self.VIEWPORT_HEIGHT: int = int(viewport.get("height", 1080))

        self.NAVIGATION_TIMEOUT_MS: int = int(navigation.get("timeout_ms", 30000))
        wait_until_candidate = self.normalize_wait_until(navigation.get("wait_until"))
        self.NAVIGATION_WAIT_UNTIL: str = wait_until_candidate or "networkidle"
        self.SETTLE_DELAY_MS: int = int(navigation.get("settle_delay_ms", 2000))
        self.LISTING_SETTLE_DELAY_MS: int = int(navigation.get("listing_settle_delay_ms", 3000))

        self.MAX_HTML_CHARS: int = int(extraction.get("max_html_chars", 10000))

        self.LOG_LEVEL: str = str(os.getenv("LOG_LEVEL", logging_settings.get("level", "INFO"))).upper()
        self.LOG_FORMAT: str = logging_settings.get("format", "%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    @staticmethod
    def normalize_wait_until(value: Any) -> str | None:
        """Map a wait condition onto a Playwright ``wait_until`` value.

        Puppeteer's ``networkidle0``/``networkidle2`` are accepted as aliases
        for ``networkidle``.

        Args:
            value: Raw wait condition from configuration or a request.

        Returns:
            str | None: A valid Playwright value, or ``None`` when ``value`` is
            empty or unknown.
        """
        if value is None:
            return None
        candidate = str(value).strip().lower()
        if candidate in {"networkidle0", "networkidle2"}:
            return "networkidle"
        if candidate in WAIT_UNTIL_OPTIONS:
            return candidate
        return None

    @staticmethod
    def _parse_bool(value: Any) -> bool:
        """Parse a boolean-like value.

        Args:
            value: Any truthy/falsy representation.

        Returns:
            bool: Parsed boolean, defaulting to False only for explicit false-like values.
        """
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        str_value = str(value).strip().lower()
        return str_value not in {"0", "false", "no", "off"}


def load_config(path: Path | str | None = None) -> Config:
    """Load the service configuration from a TOML file.

    Args:
        path: Optional path to the configuration file. When omitted, the
            function checks the `APP_CONFIG_FILE` environment variable and
            finally falls back to `config.toml`.

    Returns:
        Config: A configuration object populated with the parsed values.

    Raises:
        FileNotFoundError: If an explicitly requested configuration file
            cannot be located.
        tomllib.TOMLDecodeError: If the TOML content is malformed.
    """
    config_path = _resolve_config_path(path)

    if not config_path.exists():
        if config_path == CONFIG_PATH:
            return Config({})
        raise FileNotFoundError(f"Configuration file not found at {config_path}")

    with config_path.open("rb") as f:
        data = tomllib.load(f)

    return Config(data)


def _resolve_config_path(path: Path | str | None) -> Path:
    """Resolve the path to the configuration file.

    Args:
        path: Explicit path provided by the caller.

    Returns:
        Path: The resolved configuration path, prioritizing the argument, then
        the `APP_CONFIG_FILE` environment variable, and lastly the default
        location.
    """
    if path:
        return Path(path)

    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    return CONFIG_PATH


config = load_config()

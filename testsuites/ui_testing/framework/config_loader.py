"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration management with environment variable override support.

Features:
    - YAML configuration loading (config/config.yaml)
    - Environment variable override (UI_BASE_URL overrides ui.base_url)
    - Dot notation path access
    - Default value support with type coercion of overrides
    - Read-only UISettings snapshot for the UI suite

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from loguru import logger

from .exceptions import UIAutomationError
from .waits import WaitPolicy


PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "config.yaml"

DEFAULT_BASE_URL = "https://www.pinterest.com"


class ConfigurationError(UIAutomationError):
    """Raised when configuration loading or access fails."""
    pass


_MISSING = object()


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (UI_BASE_URL)
        2. YAML configuration file
        3. Default values

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("ui.base_url", "https://www.pinterest.com")
        'https://www.pinterest.com'

        >>> config.get("ui.explicit_wait", 20)
        20  # Default value if not configured

    Environment Variable Mapping:
        - ui.base_url -> UI_BASE_URL
        - ui.headless -> UI_HEADLESS
        - logging.level -> LOGGING_LEVEL
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file.
                        Uses DEFAULT_CONFIG_PATH if not specified.
        """
        self._config_path = Path(config_path or DEFAULT_CONFIG_PATH)
        self._config: Dict[str, Any] = {}
        self._load_config()

    @property
    def config_path(self) -> Path:
        return self._config_path

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

        if not isinstance(loaded, dict):
            raise ConfigurationError(
                f"Configuration root must be a mapping: {self._config_path}"
            )
        self._config = loaded
        logger.debug(f"Loaded configuration from: {self._config_path}")

    def _lookup(self, key: str) -> Any:
        value: Any = self._config
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return _MISSING
            value = value[part]
        return value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "ui.base_url")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        file_value = self._lookup(key)

        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            reference = default if file_value is _MISSING or file_value is None else file_value
            return self._convert_type(env_value, reference)

        if file_value is _MISSING or file_value is None:
            return default
        return file_value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get entire configuration section.

        Args:
            section: Section name (e.g., "ui", "logging")

        Returns:
            Section dictionary or empty dict if not found
        """
        value = self._config.get(section, {})
        return dict(value) if isinstance(value, dict) else {}

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """
        Convert string value to match reference type.

        Used for environment variables which are always strings.
        """
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value
        if isinstance(reference, (list, tuple)):
            return [item.strip() for item in value.split(",") if item.strip()]

        return value


def _resolve_path(value: str) -> str:
    path = Path(value)
    return str(path if path.is_absolute() else PROJECT_ROOT / path)


@dataclass(frozen=True)
class UISettings:
    """
    Read-only settings for one UI test session.

    Built once per session from ConfigLoader and shared by fixtures and page
    objects.
    """
    base_url: str = DEFAULT_BASE_URL
    home_urls: Tuple[str, ...] = ()
    browser: str = "chromium"
    headless: bool = True
    viewport: Tuple[int, int] = (1920, 1080)
    slow_mo: int = 0
    explicit_wait: float = 20.0
    locator_timeout: float = 5.0
    page_load_timeout: float = 30.0
    action_timeout: float = 5.0
    poll_interval: float = 0.5
    retry_attempts: int = 3
    screenshot_dir: str = "reports/screenshots"
    log_level: str = "INFO"
    log_file: Optional[str] = None
    testdata_files: Dict[str, str] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if self.browser not in ("chromium", "firefox", "webkit"):
            raise ConfigurationError(f"Unsupported browser: {self.browser}")
        if self.retry_attempts < 1:
            raise ConfigurationError("ui.retry_attempts must be at least 1")
        if not self.home_urls:
            object.__setattr__(self, "home_urls", (self.base_url.rstrip("/") + "/",))

    @property
    def wait_policy(self) -> WaitPolicy:
        return WaitPolicy(
            timeout=self.explicit_wait,
            locator_timeout=self.locator_timeout,
            poll_interval=self.poll_interval,
        )

    def url_for(self, path: str = "/") -> str:
        """Join ``path`` onto the base URL."""
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    @classmethod
    def from_config(cls, config: ConfigLoader) -> "UISettings":
        """Build settings from a ConfigLoader (env overrides included)."""
        viewport = config.get("ui.viewport", {}) or {}
        if not isinstance(viewport, dict):
            raise ConfigurationError(
                f"ui.viewport must be a mapping with width and height, got: {viewport!r}"
            )
        try:
            return cls(
                base_url=config.get("ui.base_url", DEFAULT_BASE_URL),
                home_urls=tuple(config.get("ui.home_urls", []) or ()),
                browser=str(config.get("ui.browser", "chromium")).lower(),
                headless=bool(config.get("ui.headless", True)),
                viewport=(
                    int(viewport.get("width", 1920)),
                    int(viewport.get("height", 1080)),
                ),
                slow_mo=int(config.get("ui.slow_mo", 0)),
                explicit_wait=float(config.get("ui.explicit_wait", 20.0)),
                locator_timeout=float(config.get("ui.locator_timeout", 5.0)),
                page_load_timeout=float(config.get("ui.page_load_timeout", 30.0)),
                action_timeout=float(config.get("ui.action_timeout", 5.0)),
                poll_interval=float(config.get("ui.poll_interval", 0.5)),
                retry_attempts=int(config.get("ui.retry_attempts", 3)),
                screenshot_dir=_resolve_path(
                    config.get("ui.screenshot_dir", "reports/screenshots")
                ),
                log_level=str(config.get("logging.level", "INFO")).upper(),
                log_file=(
                    _resolve_path(config.get("logging.file"))
                    if config.get("logging.file") else None
                ),
                testdata_files={
                    name: _resolve_path(path)
                    for name, path in config.get_section("testdata").items()
                },
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid UI configuration: {e}") from e


def load_settings(config_path: Optional[Path] = None) -> UISettings:
    """Load UISettings from ``config_path`` (or the default config file)."""
    settings = UISettings.from_config(ConfigLoader(config_path))
    logger.info(
        f"UI settings: {settings.browser} "
        f"(headless={settings.headless}) -> {settings.base_url}"
    )
    return settings


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "UISettings",
    "load_settings",
    "DEFAULT_CONFIG_PATH",
    "PROJECT_ROOT",
]

"""Optional scanner settings.

Settings come from a JSON file named by an explicit path or by the
DEP_SCANNER_CONFIG environment variable. Without either, built-in defaults are
used and no file is read. A handful of environment variables override single
keys. Validation is done here by hand, one field at a time, so that errors
name the offending key.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .discovery import EXCLUDED_SEGMENTS


CONFIG_PATH_ENV_VAR = "DEP_SCANNER_CONFIG"
SERVICE_INDEX_ENV_VAR = "DEP_SCANNER_SERVICE_INDEX"
INCLUDE_PRERELEASE_ENV_VAR = "DEP_SCANNER_INCLUDE_PRERELEASE"
REPORT_FILE_ENV_VAR = "DEP_SCANNER_REPORT_FILE"
FAIL_ON_OUTDATED_ENV_VAR = "DEP_SCANNER_FAIL_ON_OUTDATED"
SUMMARY_FILE_ENV_VAR = "DEP_SCANNER_SUMMARY_FILE"

DEFAULT_SERVICE_INDEX_URL = "https://api.nuget.org/v3/index.json"
DEFAULT_TIMEOUT = 30.0

_TRUE = {"1", "true", "yes", "y"}
_FALSE = {"0", "false", "no", "n", ""}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be loaded or is invalid."""


@dataclass(slots=True, frozen=True)
class Settings:
    """Top-level settings container."""

    service_index_url: str = DEFAULT_SERVICE_INDEX_URL
    include_prerelease: bool = True
    timeout: float = DEFAULT_TIMEOUT
    excluded_segments: tuple[str, ...] = EXCLUDED_SEGMENTS
    report_path: Path | None = None
    summary_path: Path | None = None
    fail_on_outdated: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create Settings from a parsed config object, validating each field."""
        settings = cls()

        url = data.get("serviceIndexUrl", settings.service_index_url)
        if not isinstance(url, str) or not url:
            raise ConfigError("'serviceIndexUrl' must be a non-empty string")

        include_prerelease = data.get("includePrerelease", settings.include_prerelease)
        if not isinstance(include_prerelease, bool):
            raise ConfigError("'includePrerelease' must be a boolean")

        timeout = data.get("timeout", settings.timeout)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError("'timeout' must be a positive number")

        segments = data.get("excludedSegments", list(settings.excluded_segments))
        if not isinstance(segments, list) or not segments:
            raise ConfigError("'excludedSegments' must be a non-empty array")
        if any(not isinstance(s, str) or not s for s in segments):
            raise ConfigError("'excludedSegments' entries must be non-empty strings")

        report_path = data.get("reportPath")
        if report_path is not None and (not isinstance(report_path, str) or not report_path):
            raise ConfigError("'reportPath' must be a non-empty string or null")

        summary_path = data.get("summaryPath")
        if summary_path is not None and (not isinstance(summary_path, str) or not summary_path):
            raise ConfigError("'summaryPath' must be a non-empty string or null")

        fail_on_outdated = data.get("failOnOutdated", settings.fail_on_outdated)
        if not isinstance(fail_on_outdated, bool):
            raise ConfigError("'failOnOutdated' must be a boolean")

        return cls(
            service_index_url=url,
            include_prerelease=include_prerelease,
            timeout=float(timeout),
            excluded_segments=tuple(segments),
            report_path=Path(report_path) if report_path else None,
            summary_path=Path(summary_path) if summary_path else None,
            fail_on_outdated=fail_on_outdated,
        )


def _resolve_config_path(path: Path | str | None = None) -> Path | None:
    """Resolve the configuration file path.

    Priority:
    1. Explicit path argument
    2. DEP_SCANNER_CONFIG environment variable
    3. None (defaults only)
    """
    if path is not None:
        return Path(path)

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)

    return None


def _env_flag(name: str) -> bool | None:
    raw = os.environ.get(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean flag, got {raw!r}")


def _read_config_file(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in configuration file: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")

    return data


def apply_env_overrides(settings: Settings) -> Settings:
    """Return ``settings`` with single-key environment overrides applied."""
    changes: dict[str, Any] = {}

    url = os.environ.get(SERVICE_INDEX_ENV_VAR)
    if url:
        changes["service_index_url"] = url

    include_prerelease = _env_flag(INCLUDE_PRERELEASE_ENV_VAR)
    if include_prerelease is not None:
        changes["include_prerelease"] = include_prerelease

    report_file = os.environ.get(REPORT_FILE_ENV_VAR)
    if report_file:
        changes["report_path"] = Path(report_file)

    summary_file = os.environ.get(SUMMARY_FILE_ENV_VAR)
    if summary_file:
        changes["summary_path"] = Path(summary_file)

    fail_on_outdated = _env_flag(FAIL_ON_OUTDATED_ENV_VAR)
    if fail_on_outdated is not None:
        changes["fail_on_outdated"] = fail_on_outdated

    return replace(settings, **changes) if changes else settings


def load_settings(path: Path | str | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Optional path to a JSON config file. If not provided, uses the
            DEP_SCANNER_CONFIG env var, or defaults when that is unset.

    Returns:
        A validated Settings object with environment overrides applied.

    Raises:
        ConfigError: If the file cannot be read or contains invalid data.
    """
    config_path = _resolve_config_path(path)
    if config_path is None:
        settings = Settings()
    else:
        settings = Settings.from_dict(_read_config_file(config_path))

    return apply_env_overrides(settings)

"""Crawl configuration.

A folder can carry a -config.json file that overrides any of the defaults:
- base_url / page_path_template: where character pages live
- records_dir / indexes_dir: output locations
- page_timeout / script_timeout / max_attempts / backoff: fetch policy
- delay: pause between successful characters

Environment variables (optionally from a .env file) override the file:
LEXLIST_BASE_URL, LEXLIST_DELAY, LEXLIST_TIMEOUT, LEXLIST_MAX_ATTEMPTS.
"""

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from lexlist.common.utils import _load_env_file


CONFIG_FILENAME = "-config.json"


class ConfigError(Exception):
    """Raised when a configuration file or value is unusable."""


@dataclass(frozen=True)
class CrawlConfig:
    """Configuration for one crawl or index run."""
    base_url: str = "https://www.edbchinese.hk"
    page_path_template: str = "/lexlist_ch/result.jsp?id={id}&sortBy=ks&jpC=lshk"
    records_dir: str = "data/characters"
    indexes_dir: str = "data/indexes"
    word_list: Optional[str] = None  # None: derive identifiers from existing records
    page_timeout: float = 30.0
    script_timeout: float = 5.0
    max_attempts: int = 3
    backoff: float = 2.0  # delay before retry n is backoff * n
    delay: float = 1.0
    min_page_length: int = 100

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ConfigError(f"max_attempts must be at least 1, got {self.max_attempts}")
        for name in ("page_timeout", "script_timeout"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("backoff", "delay"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative, got {getattr(self, name)}")
        if "{id}" not in self.page_path_template:
            raise ConfigError("page_path_template must contain an {id} placeholder")

    def page_url(self, character_id: str) -> str:
        """Build the page URL for a character identifier."""
        return self.base_url.rstrip("/") + self.page_path_template.format(id=character_id)

    def absolute_url(self, src: str) -> str:
        """Resolve a host-relative resource path against the base URL."""
        if src.startswith("http://") or src.startswith("https://"):
            return src
        if src.startswith("//"):
            return "https:" + src
        return self.base_url.rstrip("/") + "/" + src.lstrip("/")


_ENV_OVERRIDES = {
    "LEXLIST_BASE_URL": ("base_url", str),
    "LEXLIST_DELAY": ("delay", float),
    "LEXLIST_TIMEOUT": ("page_timeout", float),
    "LEXLIST_MAX_ATTEMPTS": ("max_attempts", int),
}


def _env_overrides() -> Dict[str, Any]:
    _load_env_file()
    overrides: Dict[str, Any] = {}
    for env_key, (field_name, cast) in _ENV_OVERRIDES.items():
        raw = os.environ.get(env_key)
        if raw is None or raw == "":
            continue
        try:
            overrides[field_name] = cast(raw)
        except ValueError as e:
            raise ConfigError(f"{env_key}={raw!r} is not a valid {cast.__name__}") from e
    return overrides


def load_config(config_path: Optional[Path] = None, use_env: bool = True, **overrides: Any) -> CrawlConfig:
    """Load configuration from a -config.json file, the environment, and explicit overrides.

    Later sources win: defaults < file < environment < keyword overrides.
    Overrides whose value is None are ignored.
    """
    values: Dict[str, Any] = {}
    if config_path is not None:
        try:
            data = json.loads(Path(config_path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(f"Cannot read config {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config {config_path} must contain a JSON object")
        known = {f.name for f in fields(CrawlConfig)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys in {config_path}: {', '.join(unknown)}")
        values.update(data)
    if use_env:
        values.update(_env_overrides())
    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return CrawlConfig(**values)
    except TypeError as e:
        raise ConfigError(str(e)) from e


"""
YAML configuration loader with validation.

Loads the school definition from a YAML file with:
- Environment variable substitution
- Required field validation
- Default values
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import structlog
import yaml

from school_dates.core.errors import ConfigurationError
from school_dates.core.http_client import DEFAULT_TIMEOUT

logger = structlog.get_logger(__name__)


DEFAULT_CONFIG_FILE = "school.yml"
REQUIRED_FIELDS = ["school_slug", "source_name", "source_url"]


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variables in text.

    Supports formats:
    - ${VAR_NAME} - required, empty string if missing
    - ${VAR_NAME:-default} - optional with default

    Args:
        text: Text with env var placeholders

    Returns:
        Text with substituted values
    """
    def replace(match):
        var_expr = match.group(1)
        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name) or default
        value = os.getenv(var_expr)
        if value is None:
            logger.warning("env_var_not_set", var=var_expr)
            return ""
        return value

    return re.sub(r"\$\{([^}]+)\}", replace, text)


@dataclass
class SchoolConfig:
    """One school's source page and identity."""

    school_slug: str
    source_name: str
    source_url: str
    tags: list[str] = field(default_factory=list)
    timeout: float = DEFAULT_TIMEOUT
    store_dir: Optional[str] = None

    def __post_init__(self):
        if not self.tags:
            self.tags = ["school", self.school_slug]

    @classmethod
    def from_dict(cls, data: dict) -> "SchoolConfig":
        """
        Build a config, rejecting missing or blank required fields.

        Raises:
            ConfigurationError: If school_slug, source_name or source_url is empty
        """
        cleaned = {
            key: str(data.get(key) or "").strip()
            for key in REQUIRED_FIELDS
        }
        for key in REQUIRED_FIELDS:
            if not cleaned[key]:
                raise ConfigurationError(key)

        timeout = data.get("timeout")
        return cls(
            school_slug=cleaned["school_slug"],
            source_name=cleaned["source_name"],
            source_url=cleaned["source_url"],
            tags=[str(tag) for tag in data.get("tags") or []],
            timeout=float(timeout) if timeout not in (None, "") else DEFAULT_TIMEOUT,
            store_dir=str(data.get("store_dir") or "").strip() or None,
        )


class ConfigLoader:
    """
    Configuration loader for the school definition.

    Loads YAML config files and validates against expected schema.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_dir: Directory containing config files
                       (defaults to package config directory)
        """
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = Path(__file__).parent

    def load_file(self, filename: str) -> dict:
        """
        Load YAML config file.

        Args:
            filename: Config file name (relative to config_dir)

        Returns:
            Parsed config dict
        """
        filepath = self.config_dir / filename

        if not filepath.exists():
            raise FileNotFoundError(f"Config file not found: {filepath}")

        logger.info("loading_config", file=str(filepath))

        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()

        content = substitute_env_vars(content)
        config = yaml.safe_load(content)

        return config or {}

    def load_school(self, filename: str = DEFAULT_CONFIG_FILE) -> SchoolConfig:
        """
        Load the school definition from YAML.

        Args:
            filename: Config file name

        Returns:
            Validated SchoolConfig

        Raises:
            ConfigurationError: If a required field is missing or empty
        """
        config = self.load_file(filename)
        school = SchoolConfig.from_dict(config.get("school") or {})
        logger.info("school_loaded", school=school.school_slug, url=school.source_url)
        return school


def load_school_config(config_path: Optional[str] = None) -> SchoolConfig:
    """
    Convenience function to load the school config.

    Args:
        config_path: Optional path to a YAML config file

    Returns:
        SchoolConfig
    """
    if config_path:
        loader = ConfigLoader(str(Path(config_path).parent))
        return loader.load_school(Path(config_path).name)
    return ConfigLoader().load_school()

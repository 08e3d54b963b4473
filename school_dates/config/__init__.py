"""
Configuration module for the school source.

Provides:
- YAML config loading with validation
- Environment variable substitution
"""

from .loader import ConfigLoader, SchoolConfig, load_school_config

__all__ = ["ConfigLoader", "SchoolConfig", "load_school_config"]

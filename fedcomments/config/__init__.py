"""Configuration module: exports Settings and load_config."""

from fedcomments.config.loader import load_config
from fedcomments.config.settings import Settings

__all__ = ["Settings", "load_config"]

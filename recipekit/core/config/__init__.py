"""Configuration module."""

from recipekit.core.config.loader import load_config
from recipekit.core.config.schema import Config

__all__ = ["Config", "load_config"]

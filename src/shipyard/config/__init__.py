"""Configuration loading for resource declarations."""

from shipyard.config.context import EvalContext
from shipyard.config.loader import ConfigLoader, ensure_absolute, load_folder

__all__ = [
    "ConfigLoader",
    "EvalContext",
    "ensure_absolute",
    "load_folder",
]

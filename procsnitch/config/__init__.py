"""Configuration loading for procsnitch."""

from .config_loader import ConfigLoader
from .snitch_config import SnitchConfig

__all__ = ["ConfigLoader", "SnitchConfig"]

"""Configuration module: exports Settings and load_config.

No settings singleton lives here: ``src.main`` and the CLI build one
``Settings`` at start-up and pass it to the components that need it.
"""

from src.config.loader import load_config
from src.config.settings import Settings

__all__ = ["Settings", "load_config"]

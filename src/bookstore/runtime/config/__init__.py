"""Configuration resolver: environment plus secret bundle."""

from .settings import Settings
from .store import ConfigStore

__all__ = ["ConfigStore", "Settings"]

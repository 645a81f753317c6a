"""
Configuration Adapters - Load configuration from various sources.
"""

from .environment import EnvironmentConfigProvider
from .file_config import FileConfigProvider


__all__ = ["EnvironmentConfigProvider", "FileConfigProvider"]

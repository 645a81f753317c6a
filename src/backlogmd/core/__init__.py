"""
Core module - Pure domain logic with no external dependencies.

This module contains:
- domain/: Entities of the issue cache
- ports/: Abstract interfaces that adapters must implement
- outcome: Classified results of remote attempts
- exceptions: Centralized exception hierarchy
- logging: Loggers with bound context fields
"""

from .domain import *  # noqa: F403
from .exceptions import *  # noqa: F403
from .outcome import *  # noqa: F403
from .ports import *  # noqa: F403

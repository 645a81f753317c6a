"""
CLI module - Command line interface for backlogmd.
"""

from .app import main, run


__all__ = ["main", "run"]

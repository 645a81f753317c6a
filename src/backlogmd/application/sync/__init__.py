"""
Sync module - Online-first reads with local cache fallback.
"""

from .orchestrator import OperationState, SyncOrchestrator, SyncResult


__all__ = ["OperationState", "SyncOrchestrator", "SyncResult"]

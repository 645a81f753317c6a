"""
Application layer - Use cases built on the core ports.

- credentials: Lock-guarded API key cache
- sync: Online-first orchestration with cache fallback
- export: Markdown export file naming and writing
- commands: Command surface, error envelope and worker dispatch
"""

from .commands import BacklogCommands, CommandDispatcher, CommandResponse, ErrorEnvelope
from .credentials import CredentialCache, pick_api_key
from .sync import OperationState, SyncOrchestrator, SyncResult


__all__ = [
    "BacklogCommands",
    "CommandDispatcher",
    "CommandResponse",
    "CredentialCache",
    "ErrorEnvelope",
    "OperationState",
    "SyncOrchestrator",
    "SyncResult",
    "pick_api_key",
]

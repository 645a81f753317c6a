"""
Backlog Adapter - Integration with the Backlog issue tracker.

This module provides the BacklogIssueSource and the retrying HTTP client
it is built on.
"""

from backlogmd.adapters.backlog.adapter import BacklogIssueSource
from backlogmd.adapters.backlog.client import Backoff, RetryingHttpClient, redact_url


__all__ = ["Backoff", "BacklogIssueSource", "RetryingHttpClient", "redact_url"]

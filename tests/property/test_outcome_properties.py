"""
Property-based tests for outcome classification.

Tests invariants for:
- classify() being total and deterministic
- The 5xx range and unlisted status codes
"""

from hypothesis import given
from hypothesis import strategies as st

from backlogmd.core.outcome import OutcomeKind, classify


class TestClassifyProperties:
    """Property tests for classify()."""

    @given(st.integers())
    def test_total_and_deterministic(self, status):
        """classify never raises and returns the same kind twice."""
        assert classify(status).kind == classify(status).kind

    @given(st.integers(min_value=500, max_value=599))
    def test_any_5xx_is_server_error(self, status):
        assert classify(status).kind == OutcomeKind.SERVER_ERROR

    @given(st.integers().filter(lambda s: s not in (200, 401, 403, 404, 429) and not 500 <= s <= 599))
    def test_unlisted_codes_are_unknown(self, status):
        assert classify(status).kind == OutcomeKind.UNKNOWN_STATUS

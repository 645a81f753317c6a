"""
Retrying HTTP Client - Low-level GET client with timeouts and backoff.

This handles the raw HTTP communication with the tracker and turns every
attempt into an Outcome. The BacklogIssueSource uses this to implement
the IssueSourcePort.

Only rate limiting (429) and connect/timeout failures are retried. Any
other outcome, successful or not, ends the loop at once.
"""

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import requests
from requests.adapters import HTTPAdapter

from backlogmd.core.outcome import (
    Outcome,
    TransportFatal,
    TransportTransient,
    classify,
)


_API_KEY_PATTERN = re.compile(r"(apiKey=)[^&#]*")


def redact_url(url: str) -> str:
    """Hide the ``apiKey`` query value so URLs can be logged."""
    return _API_KEY_PATTERN.sub(r"\1***", url)


@dataclass(frozen=True)
class Backoff:
    """
    Delay before the next retry.

    Immutable: each retry computes a new Backoff instead of mutating this one.
    """

    delay: float
    factor: float

    def next(self) -> "Backoff":
        return Backoff(delay=self.delay * self.factor, factor=self.factor)


class RetryingHttpClient:
    """
    Blocking HTTP GET client with bounded exponential backoff.

    Features:
    - Separate connect and read timeouts
    - Retry on 429 and on connect/timeout failures
    - Connection pooling through a shared requests Session
    """

    DEFAULT_CONNECT_TIMEOUT = 8.0  # seconds
    DEFAULT_TOTAL_TIMEOUT = 20.0  # seconds
    DEFAULT_MAX_ATTEMPTS = 3
    DEFAULT_INITIAL_DELAY = 1.0  # seconds
    DEFAULT_BACKOFF_FACTOR = 2.0

    DEFAULT_POOL_CONNECTIONS = 4
    DEFAULT_POOL_MAXSIZE = 4

    def __init__(
        self,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        total_timeout: float = DEFAULT_TOTAL_TIMEOUT,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the client.

        Args:
            connect_timeout: Seconds allowed to establish a connection
            total_timeout: Seconds allowed to wait for the response
            max_attempts: Total attempts per request, first one included
            initial_delay: Delay before the first retry in seconds
            backoff_factor: Multiplier applied to the delay after each retry
            session: Optional preconfigured requests Session
            sleep: Sleep function used between attempts
        """
        self.connect_timeout = connect_timeout
        self.total_timeout = total_timeout
        self.max_attempts = max(1, max_attempts)
        self.initial_delay = initial_delay
        self.backoff_factor = backoff_factor
        self._sleep = sleep
        self.logger = logging.getLogger("RetryingHttpClient")

        if session is None:
            session = requests.Session()
            adapter = HTTPAdapter(
                pool_connections=self.DEFAULT_POOL_CONNECTIONS,
                pool_maxsize=self.DEFAULT_POOL_MAXSIZE,
            )
            session.mount("https://", adapter)
            session.mount("http://", adapter)
            session.headers.update({"Accept": "application/json"})
        self._session = session

    # -------------------------------------------------------------------------
    # Core Request Methods
    # -------------------------------------------------------------------------

    def request(self, url: str) -> Outcome:
        """
        GET ``url``, retrying transient failures with exponential backoff.

        Returns:
            The first terminal Outcome, or the last retryable one when all
            attempts are used up
        """
        backoff = Backoff(delay=self.initial_delay, factor=self.backoff_factor)

        for attempt in range(1, self.max_attempts + 1):
            outcome = self.request_once(url)

            if not outcome.is_retryable:
                return outcome

            if attempt == self.max_attempts:
                self.logger.warning(
                    f"Giving up on {redact_url(url)} after {attempt} attempts: "
                    f"{outcome.kind.value}"
                )
                return outcome

            self.logger.warning(
                f"{outcome.kind.value} on GET {redact_url(url)}, "
                f"attempt {attempt}/{self.max_attempts}, retrying in {backoff.delay:.2f}s"
            )
            self._sleep(backoff.delay)
            backoff = backoff.next()

        # Unreachable while max_attempts >= 1
        return TransportFatal(detail="retry loop exhausted")

    def request_once(self, url: str) -> Outcome:
        """Perform a single GET attempt and classify it."""
        try:
            response = self._session.get(
                url,
                timeout=(self.connect_timeout, self.total_timeout),
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            self.logger.debug(f"Transient transport failure on {redact_url(url)}: {type(e).__name__}")
            return TransportTransient(detail=redact_url(str(e)))
        except requests.exceptions.RequestException as e:
            self.logger.debug(f"Fatal transport failure on {redact_url(url)}: {type(e).__name__}")
            return TransportFatal(detail=redact_url(str(e)))

        outcome = classify(response.status_code, body=response.text or "")
        self.logger.debug(f"GET {redact_url(url)} -> {response.status_code} ({outcome.kind.value})")
        return outcome

    # -------------------------------------------------------------------------
    # Resource Cleanup
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close the client and release connection pool resources."""
        self._session.close()
        self.logger.debug("Closed HTTP session")

    def __enter__(self) -> "RetryingHttpClient":
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: Any) -> None:
        self.close()

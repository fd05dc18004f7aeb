"""Fetching raw pages and animation scripts with a retry policy.

One attempt walks an ordered list of transports and returns the first usable
body. Attempts are retried with an increasing delay; when the policy is
exhausted RetriesExhausted is raised and the caller decides whether that is
fatal (it never is for a single character).
"""

import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import requests
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)


BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "zh-HK,zh;q=0.9,en;q=0.8",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}

PLAIN_HEADERS = {"User-Agent": "Mozilla/5.0"}


class FetchError(Exception):
    """A single attempt failed on every transport."""


class RetriesExhausted(FetchError):
    """Every attempt allowed by the policy failed."""

    def __init__(self, url: str, attempts: int, last_error: Optional[BaseException]):
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"{url}: failed after {attempts} attempt(s): {last_error}")


@dataclass(frozen=True)
class FetchPolicy:
    """Timeout and retry schedule for one kind of resource."""
    timeout: float = 30.0
    max_attempts: int = 3
    backoff: float = 2.0  # wait before retry n is backoff * n
    min_length: int = 0   # bodies shorter than this count as failures


class Transport:
    """One way of turning a URL into text."""
    name = "transport"

    def get(self, url: str, timeout: float) -> str:
        raise NotImplementedError


class SessionTransport(Transport):
    """Pooled requests session with browser-like headers."""
    name = "session"

    def __init__(self, session: Optional[requests.Session] = None):
        self._session = session or requests.Session()
        self._session.headers.update(BROWSER_HEADERS)

    def get(self, url: str, timeout: float) -> str:
        resp = self._session.get(url, timeout=timeout)
        resp.raise_for_status()
        if not resp.encoding or resp.encoding.lower() == "iso-8859-1":
            resp.encoding = resp.apparent_encoding
        return resp.text or ""


class PlainTransport(Transport):
    """One-shot request on a fresh connection with a minimal user agent."""
    name = "plain"

    def get(self, url: str, timeout: float) -> str:
        resp = requests.get(url, timeout=timeout, headers=PLAIN_HEADERS)
        resp.raise_for_status()
        if not resp.encoding or resp.encoding.lower() == "iso-8859-1":
            resp.encoding = resp.apparent_encoding
        return resp.text or ""


def default_transports() -> List[Transport]:
    """Primary session transport followed by the plain fallback."""
    return [SessionTransport(), PlainTransport()]


def _attempt(url: str, policy: FetchPolicy, transports: Sequence[Transport], verbose: bool) -> str:
    """Try each transport once, in order."""
    errors: List[str] = []
    for transport in transports:
        try:
            body = transport.get(url, policy.timeout)
        except requests.RequestException as e:
            errors.append(f"{transport.name}: {e}")
            if verbose:
                print(f"[fetch] [fallback] {transport.name} failed: {e}")
            continue
        if len(body) < max(policy.min_length, 1):
            errors.append(f"{transport.name}: body too short ({len(body)} bytes)")
            if verbose:
                print(f"[fetch] [fallback] {transport.name} returned {len(body)} bytes")
            continue
        return body
    raise FetchError("; ".join(errors) or "no transports configured")


def fetch_with_policy(
    url: str,
    policy: FetchPolicy,
    transports: Optional[Sequence[Transport]] = None,
    sleep: Callable[[float], None] = time.sleep,
    verbose: bool = False,
) -> str:
    """Fetch url as text, retrying whole transport rounds according to policy.

    Raises RetriesExhausted when no attempt succeeds.
    """
    if transports is None:
        transports = default_transports()

    def _log_retry(state: RetryCallState) -> None:
        if not verbose:
            return
        exc = state.outcome.exception() if state.outcome else None
        delay = state.next_action.sleep if state.next_action else 0
        print(f"[fetch] [retry] attempt {state.attempt_number}/{policy.max_attempts} failed ({exc}); waiting {delay:.1f}s")

    retrying = Retrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=wait_incrementing(start=policy.backoff, increment=policy.backoff),
        retry=retry_if_exception_type(FetchError),
        before_sleep=_log_retry,
        sleep=sleep,
        reraise=True,
    )
    try:
        return retrying(_attempt, url, policy, transports, verbose)
    except FetchError as e:
        raise RetriesExhausted(url, policy.max_attempts, e) from e

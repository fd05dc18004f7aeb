"""Tests for fetch-with-policy."""

from unittest.mock import MagicMock

import pytest
import requests

from lexlist.common.fetch import (
    BROWSER_HEADERS,
    FetchPolicy,
    RetriesExhausted,
    SessionTransport,
    fetch_with_policy,
)


URL = "https://example.test/page"
BODY = "<html>" + "x" * 200 + "</html>"


class TestFetchWithPolicy:
    """Tests for retries, backoff and transport fallback."""

    def test_first_transport_succeeds(self, make_transport, sleeps):
        """A good body on the first try needs no retry."""
        primary = make_transport({URL: BODY})
        fallback = make_transport({URL: BODY})
        assert fetch_with_policy(URL, FetchPolicy(), [primary, fallback], sleep=sleeps.append) == BODY
        assert fallback.calls == []
        assert sleeps == []

    def test_falls_back_within_one_attempt(self, make_transport, sleeps):
        """A failing transport is followed by the next one in the same attempt."""
        primary = make_transport()
        fallback = make_transport({URL: BODY})
        assert fetch_with_policy(URL, FetchPolicy(), [primary, fallback], sleep=sleeps.append) == BODY
        assert primary.calls == [URL]
        assert sleeps == []

    def test_retries_with_increasing_backoff(self, make_transport, sleeps):
        """Every attempt failing raises RetriesExhausted after growing waits."""
        transport = make_transport({URL: requests.Timeout("timed out")})
        policy = FetchPolicy(timeout=1, max_attempts=3, backoff=2)
        with pytest.raises(RetriesExhausted) as exc_info:
            fetch_with_policy(URL, policy, [transport], sleep=sleeps.append)
        assert exc_info.value.url == URL
        assert exc_info.value.attempts == 3
        assert "timed out" in str(exc_info.value.last_error)
        assert len(transport.calls) == 3
        assert sleeps == [2, 4]

    def test_recovers_on_later_attempt(self, make_transport, sleeps):
        """A transient failure is retried."""
        transport = make_transport()
        original_get = transport.get

        def flaky(url, timeout):
            if len(transport.calls) < 1:
                transport.calls.append(url)
                raise requests.ConnectionError("reset")
            return original_get(url, timeout)

        transport.bodies[URL] = BODY
        transport.get = flaky
        assert fetch_with_policy(URL, FetchPolicy(backoff=0.5), [transport], sleep=sleeps.append) == BODY
        assert sleeps == [0.5]

    def test_short_body_is_a_failure(self, make_transport, sleeps):
        """Bodies under the minimum length count as transport failures."""
        transport = make_transport({URL: "tiny"})
        policy = FetchPolicy(max_attempts=1, min_length=100)
        with pytest.raises(RetriesExhausted):
            fetch_with_policy(URL, policy, [transport], sleep=sleeps.append)

    def test_empty_body_is_a_failure(self, make_transport, sleeps):
        transport = make_transport({URL: ""})
        with pytest.raises(RetriesExhausted):
            fetch_with_policy(URL, FetchPolicy(max_attempts=1), [transport], sleep=sleeps.append)

    def test_verbose_retry_logging(self, make_transport, sleeps, capsys):
        """Retries are announced in verbose mode."""
        transport = make_transport()
        with pytest.raises(RetriesExhausted):
            fetch_with_policy(URL, FetchPolicy(max_attempts=2), [transport], sleep=sleeps.append, verbose=True)
        out = capsys.readouterr().out
        assert "[fetch] [retry] attempt 1/2" in out


class TestSessionTransport:
    """Tests for the pooled session transport."""

    def test_browser_headers_and_timeout(self):
        """The session carries browser headers and passes the policy timeout."""
        session = MagicMock()
        session.headers = {}
        response = MagicMock()
        response.encoding = "utf-8"
        response.text = BODY
        session.get.return_value = response

        transport = SessionTransport(session)
        assert transport.get(URL, 7) == BODY
        session.get.assert_called_once_with(URL, timeout=7)
        response.raise_for_status.assert_called_once()
        assert session.headers["User-Agent"] == BROWSER_HEADERS["User-Agent"]

    def test_guesses_encoding(self):
        """A missing charset falls back to the detected encoding."""
        session = MagicMock()
        session.headers = {}
        response = MagicMock()
        response.encoding = "ISO-8859-1"
        response.apparent_encoding = "utf-8"
        response.text = BODY
        session.get.return_value = response

        SessionTransport(session).get(URL, 5)
        assert response.encoding == "utf-8"

"""
Tests for utils/http.py: RetryStrategy, SessionManager and fetch_json.

No network calls are made; the session's get() is patched.
"""
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.http import RetryStrategy, SessionManager, fetch_json


def _response(status=200, payload=None, content=b"[]"):
    resp = MagicMock()
    resp.status_code = status
    resp.content = content
    resp.json.return_value = payload
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return resp


# ── RetryStrategy tests ──────────────────────────────────────────────────────

class TestRetryStrategy:
    def test_defaults(self):
        rs = RetryStrategy()
        assert rs.max_retries == 0
        assert rs.backoff_factor == 2.0
        assert 503 in rs.status_forcelist

    def test_get_retry_object(self):
        retry = RetryStrategy(max_retries=4, backoff_factor=3.0).get_retry_object()
        assert retry.total == 4
        assert retry.backoff_factor == 3.0
        assert "GET" in retry.allowed_methods


# ── SessionManager tests ─────────────────────────────────────────────────────

class TestSessionManager:
    def test_session_cached(self):
        sm = SessionManager()
        assert sm.session is sm.session
        sm.close()

    def test_adapters_mounted(self):
        with SessionManager(RetryStrategy(max_retries=2)) as sm:
            adapter = sm.session.get_adapter("https://example.com")
            assert adapter.max_retries.total == 2

    def test_close_resets_session(self):
        sm = SessionManager()
        first = sm.session
        sm.close()
        assert sm._session is None
        assert sm.session is not first
        sm.close()


# ── fetch_json tests ─────────────────────────────────────────────────────────

class TestFetchJson:
    def test_returns_decoded_body(self):
        with SessionManager() as sm, \
                patch.object(sm.session, "get", return_value=_response(payload=[{"a": 1}])) as get:
            assert fetch_json("https://example.com/x.json", timeout=5, session_manager=sm) == [{"a": 1}]
        get.assert_called_once_with("https://example.com/x.json", timeout=5)

    def test_http_error_raises(self):
        with SessionManager() as sm, \
                patch.object(sm.session, "get", return_value=_response(status=503)):
            with pytest.raises(requests.HTTPError):
                fetch_json("https://example.com/x.json", session_manager=sm)

    def test_invalid_json_raises_value_error(self):
        resp = _response()
        resp.json.side_effect = ValueError("not json")
        with SessionManager() as sm, patch.object(sm.session, "get", return_value=resp):
            with pytest.raises(ValueError):
                fetch_json("https://example.com/x.json", session_manager=sm)

    def test_owned_session_is_closed(self):
        with patch.object(SessionManager, "close") as close, \
                patch("requests.Session.get", return_value=_response(payload=[])):
            fetch_json("https://example.com/x.json")
        close.assert_called_once()

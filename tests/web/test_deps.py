"""Tests for web middleware and deps edge cases."""

import asyncio
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from billtrack.errors import UpstreamUnavailableError
from web.deps import DBConnectionMiddleware, get_bill_extractor


class TestDBConnectionMiddlewareNonHTTP:
    def test_non_http_scope_passes_through(self):
        called = False

        async def inner_app(scope, receive, send):
            nonlocal called
            called = True

        middleware = DBConnectionMiddleware(inner_app)
        asyncio.run(middleware({"type": "lifespan"}, None, None))
        assert called


class TestDBConnectionLifecycle:
    def test_health_opens_no_connection(self, client, test_engine):
        with patch("web.deps.get_engine") as mock_get_engine:
            client.get("/health")
        mock_get_engine.assert_not_called()

    def test_connection_closed_after_request(self, client, test_engine):
        conn = MagicMock(wraps=test_engine.connect())
        engine = MagicMock()
        engine.connect.return_value = conn
        with patch("web.deps.get_engine", return_value=engine):
            client.get("/api/bills")
        engine.connect.assert_called_once()
        conn.close.assert_called_once()


def _request(state=None):
    app = SimpleNamespace(state=state or SimpleNamespace())
    return SimpleNamespace(app=app)


class TestGetBillExtractor:
    def test_built_once_and_cached(self):
        request = _request()
        extractor = MagicMock(model="m")
        with patch("web.deps.build_bill_extractor", return_value=extractor) as build:
            assert get_bill_extractor(request) is extractor
            assert get_bill_extractor(request) is extractor
        build.assert_called_once()

    def test_build_failure_is_not_cached(self):
        request = _request()
        with patch("web.deps.build_bill_extractor", side_effect=UpstreamUnavailableError("no key")):
            with pytest.raises(UpstreamUnavailableError):
                get_bill_extractor(request)
        assert getattr(request.app.state, "bill_extractor", None) is None

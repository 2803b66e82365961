"""Unit tests for TraceMiddleware (request tracing).

Tests cover:
- Trace ID generation for new requests
- Trace ID extraction from X-Trace-Id header
- Contextvars propagation and cleanup
- Trace ID included in response headers
- get_trace_id() function

Architecture:
- Unit tests with mocked Starlette Request/Response
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import pytest
import structlog

from midcurve_api.presentation.routers.api.middleware.trace_middleware import (
    TraceMiddleware,
    get_trace_id,
)


def _mock_request(headers):
    request = MagicMock()
    request.headers = headers
    request.state = MagicMock()
    return request


@pytest.mark.unit
class TestTraceMiddlewareTraceIdGeneration:
    async def test_generates_new_trace_id_when_missing(self):
        mock_response = MagicMock()
        mock_response.headers = {}
        middleware = TraceMiddleware(app=MagicMock())

        response = await middleware.dispatch(
            _mock_request({}), AsyncMock(return_value=mock_response)
        )

        UUID(response.headers["X-Trace-Id"])

    async def test_uses_existing_trace_id_from_header(self):
        mock_response = MagicMock()
        mock_response.headers = {}
        middleware = TraceMiddleware(app=MagicMock())

        response = await middleware.dispatch(
            _mock_request({"X-Trace-Id": "trace-abc"}), AsyncMock(return_value=mock_response)
        )

        assert response.headers["X-Trace-Id"] == "trace-abc"


@pytest.mark.unit
class TestTraceMiddlewareContextPropagation:
    async def test_trace_id_visible_during_request(self):
        seen = {}

        async def call_next(request):
            seen["trace_id"] = get_trace_id()
            seen["structlog"] = structlog.contextvars.get_contextvars().get("trace_id")
            response = MagicMock()
            response.headers = {}
            return response

        request = _mock_request({"X-Trace-Id": "trace-ctx"})
        await TraceMiddleware(app=MagicMock()).dispatch(request, call_next)

        assert seen == {"trace_id": "trace-ctx", "structlog": "trace-ctx"}
        assert request.state.trace_id == "trace-ctx"

    async def test_context_is_reset_after_request(self):
        mock_response = MagicMock()
        mock_response.headers = {}

        await TraceMiddleware(app=MagicMock()).dispatch(
            _mock_request({"X-Trace-Id": "trace-done"}), AsyncMock(return_value=mock_response)
        )

        assert get_trace_id() is None
        assert "trace_id" not in structlog.contextvars.get_contextvars()

    async def test_context_is_reset_when_handler_raises(self):
        middleware = TraceMiddleware(app=MagicMock())

        with pytest.raises(RuntimeError):
            await middleware.dispatch(
                _mock_request({}), AsyncMock(side_effect=RuntimeError("boom"))
            )

        assert get_trace_id() is None


@pytest.mark.unit
def test_get_trace_id_outside_request_is_none():
    assert get_trace_id() is None

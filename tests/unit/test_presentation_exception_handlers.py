"""Unit tests for global exception handlers and query model parsing."""

import json
from unittest.mock import MagicMock

import pytest
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from midcurve_api.core.enums import ApiErrorCode
from midcurve_api.core.errors import ApiError
from midcurve_api.presentation.routers.api.query_params import query_model
from midcurve_api.presentation.routers.api.v1.errors.exception_handlers import (
    api_error_handler,
    format_validation_errors,
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from midcurve_api.schemas.position_schemas import ListUniswapV3PositionsQuery


def _request():
    request = MagicMock()
    request.url.path = "/api/v1/positions/list"
    request.method = "GET"
    return request


@pytest.mark.unit
class TestFormatValidationErrors:
    def test_location_prefix_is_stripped(self):
        errors = [
            {"loc": ("body", "events", 0, "liquidity"), "msg": "Field required", "type": "missing"}
        ]

        assert format_validation_errors(errors) == [
            {"path": ["events", 0, "liquidity"], "message": "Field required", "code": "missing"}
        ]

    def test_model_level_error_has_empty_path(self):
        errors = [{"loc": ("query",), "msg": "Value error, need one", "type": "value_error"}]

        assert format_validation_errors(errors)[0]["path"] == []

    def test_missing_keys_get_defaults(self):
        assert format_validation_errors([{}]) == [
            {"path": [], "message": "Invalid value", "code": "validation_error"}
        ]


@pytest.mark.unit
class TestHandlers:
    async def test_api_error_handler(self):
        error = ApiError(
            ApiErrorCode.POSITION_NOT_FOUND, "Position not found", {"nftId": 1}
        )

        response = await api_error_handler(_request(), error)

        assert response.status_code == 404
        body = json.loads(response.body)
        assert body["error"] == {
            "code": "POSITION_NOT_FOUND",
            "message": "Position not found",
            "details": {"nftId": 1},
        }

    @pytest.mark.parametrize(
        ("loc", "message"),
        [
            (("query", "limit"), "Invalid query parameters"),
            (("path", "chain_id"), "Invalid path parameters"),
            (("body", "name"), "Invalid request data"),
        ],
    )
    async def test_validation_handler_message(self, loc, message):
        exc = RequestValidationError([{"loc": loc, "msg": "bad", "type": "value_error"}])

        response = await validation_exception_handler(_request(), exc)

        assert response.status_code == 400
        body = json.loads(response.body)
        assert body["error"]["code"] == "VALIDATION_ERROR"
        assert body["error"]["message"] == message

    @pytest.mark.parametrize(
        ("status", "code", "expected_status"),
        [
            (404, "NOT_FOUND", 404),
            (405, "BAD_REQUEST", 400),
            (401, "UNAUTHORIZED", 401),
            (418, "BAD_REQUEST", 400),
            (504, "INTERNAL_SERVER_ERROR", 500),
        ],
    )
    async def test_http_exception_maps_to_closed_code_set(self, status, code, expected_status):
        response = await http_exception_handler(
            _request(), StarletteHTTPException(status_code=status, detail="Nope")
        )

        assert response.status_code == expected_status
        assert json.loads(response.body)["error"]["code"] == code

    async def test_generic_handler_hides_exception(self):
        response = await generic_exception_handler(
            _request(), RuntimeError("secret connection string")
        )

        assert response.status_code == 500
        error = json.loads(response.body)["error"]
        assert error == {
            "code": "INTERNAL_SERVER_ERROR",
            "message": "An unexpected error occurred",
        }


@pytest.mark.unit
class TestQueryModel:
    def _request_with_query(self, params):
        request = MagicMock()
        request.query_params.items.return_value = list(params.items())
        return request

    def test_parses_and_drops_empty_values(self):
        dependency = query_model(ListUniswapV3PositionsQuery)

        query = dependency(self._request_with_query({"limit": "5", "chainId": ""}))

        assert query.limit == 5
        assert query.chain_id is None

    def test_errors_carry_query_location(self):
        dependency = query_model(ListUniswapV3PositionsQuery)

        with pytest.raises(RequestValidationError) as exc_info:
            dependency(self._request_with_query({"limit": "0"}))

        assert exc_info.value.errors()[0]["loc"] == ("query", "limit")

    def test_dependency_name(self):
        assert query_model(ListUniswapV3PositionsQuery).__name__ == (
            "parse_ListUniswapV3PositionsQuery"
        )

"""Unit tests for EnvelopeBuilder (success, error and paginated envelopes)."""

import json

import pytest
from freezegun import freeze_time

from midcurve_api.core.enums import ApiErrorCode
from midcurve_api.presentation.routers.api.v1.responses import EnvelopeBuilder


@pytest.mark.unit
class TestSuccessEnvelope:
    @freeze_time("2025-01-15 12:00:00")
    def test_success_shape(self):
        envelope = EnvelopeBuilder.success({"nonce": "abc"})

        assert envelope == {
            "success": True,
            "data": {"nonce": "abc"},
            "meta": {"timestamp": "2025-01-15T12:00:00.000Z"},
        }

    def test_extra_meta_is_merged_and_serialized(self):
        envelope = EnvelopeBuilder.success([], meta={"count": 0, "poolId": None})

        assert envelope["meta"]["count"] == 0
        assert envelope["meta"]["poolId"] is None
        assert "timestamp" in envelope["meta"]

    def test_data_is_serialized(self):
        envelope = EnvelopeBuilder.success({"liquidity": 2**128})

        assert envelope["data"] == {"liquidity": str(2**128)}

    def test_response_status_and_headers(self):
        response = EnvelopeBuilder.success_response(
            {"id": "key_1"}, status_code=201, headers={"Cache-Control": "no-store"}
        )

        assert response.status_code == 201
        assert response.headers["Cache-Control"] == "no-store"
        assert json.loads(response.body)["data"] == {"id": "key_1"}


@pytest.mark.unit
class TestErrorEnvelope:
    def test_details_omitted_when_none(self):
        envelope = EnvelopeBuilder.error(ApiErrorCode.NOT_FOUND, "Not Found")

        assert envelope["success"] is False
        assert envelope["error"] == {"code": "NOT_FOUND", "message": "Not Found"}

    def test_details_kept_when_falsy_but_present(self):
        envelope = EnvelopeBuilder.error(ApiErrorCode.VALIDATION_ERROR, "Invalid", [])

        assert envelope["error"]["details"] == []

    @pytest.mark.parametrize(
        ("code", "status"),
        [
            (ApiErrorCode.VALIDATION_ERROR, 400),
            (ApiErrorCode.UNAUTHORIZED, 401),
            (ApiErrorCode.TOKEN_NOT_FOUND, 404),
            (ApiErrorCode.CONFLICT, 409),
            (ApiErrorCode.INTERNAL_SERVER_ERROR, 500),
        ],
    )
    def test_response_status_derives_from_code(self, code, status):
        response = EnvelopeBuilder.error_response(code, "message")

        assert response.status_code == status
        assert json.loads(response.body)["error"]["code"] == code.value


@pytest.mark.unit
class TestPaginatedEnvelope:
    def test_pagination_block(self):
        envelope = EnvelopeBuilder.paginated(
            [{"id": 1}, {"id": 2}], total=5, limit=2, offset=0, meta={"filters": {}}
        )

        assert envelope["pagination"] == {
            "total": 5,
            "limit": 2,
            "offset": 0,
            "hasMore": True,
        }
        assert envelope["meta"]["filters"] == {}

    @pytest.mark.parametrize(
        ("item_count", "total", "limit", "offset", "expected"),
        [
            (2, 5, 2, 0, True),
            (2, 5, 2, 2, True),
            (1, 5, 2, 4, False),
            (0, 5, 2, 10, False),
            (0, 0, 20, 0, False),
            (20, 20, 20, 0, False),
        ],
    )
    def test_has_more(self, item_count, total, limit, offset, expected):
        assert (
            EnvelopeBuilder.has_more(
                item_count=item_count, total=total, limit=limit, offset=offset
            )
            is expected
        )

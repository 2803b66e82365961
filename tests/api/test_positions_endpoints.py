"""API tests for position endpoints.

- GET /api/v1/positions/list
- GET /api/v1/positions/uniswapv3/list
- POST /api/v1/positions/uniswapv3/import
- PUT/PATCH/GET/DELETE /api/v1/positions/uniswapv3/{chainId}/{nftId}
- GET /api/v1/positions/uniswapv3/{chainId}/{nftId}/ledger
- GET /api/v1/positions/uniswapv3/{chainId}/{nftId}/apr
"""

import pytest

from midcurve_api.core.errors import ServiceError, ServiceErrorKind
from tests.utils.fake_services import (
    OTHER_USER_ID,
    POOL_ADDRESS,
    UINT256_MAX,
    USER_ID,
    WALLET_ADDRESS,
)

TX_HASH = "0x" + "ab" * 32


def _event(**overrides):
    event = {
        "eventType": "INCREASE_LIQUIDITY",
        "timestamp": "2025-01-15T12:00:00Z",
        "blockNumber": "21000000",
        "transactionIndex": 4,
        "logIndex": 17,
        "transactionHash": TX_HASH,
        "liquidity": str(UINT256_MAX),
        "amount0": "1000000",
        "amount1": "500000000000000000",
    }
    event.update(overrides)
    return {key: value for key, value in event.items() if value is not None}


def _create_body(**overrides):
    increase = _event()
    del increase["eventType"]
    body = {
        "poolAddress": POOL_ADDRESS,
        "tickLower": -887220,
        "tickUpper": 887220,
        "ownerAddress": WALLET_ADDRESS,
        "increaseEvent": increase,
    }
    body.update(overrides)
    return body


@pytest.fixture
def seeded(services):
    positions = services.positions
    for nft_id in range(1, 6):
        positions.add_position(user_id=USER_ID, chain_id=1, nft_id=nft_id)
    positions.add_position(user_id=USER_ID, chain_id=42161, nft_id=100, is_active=False)
    positions.add_position(user_id=USER_ID, chain_id=42161, nft_id=101)
    positions.add_position(user_id=OTHER_USER_ID, chain_id=1, nft_id=999)
    return positions


@pytest.mark.api
class TestListUniswapV3Positions:
    URL = "/api/v1/positions/uniswapv3/list"

    def test_first_page_has_more(self, client, seeded, api_key_headers):
        response = client.get(f"{self.URL}?limit=3", headers=api_key_headers)

        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 3
        assert body["pagination"] == {"total": 7, "limit": 3, "offset": 0, "hasMore": True}
        assert body["meta"]["filters"] == {"status": "all"}

    def test_last_page_has_no_more(self, client, seeded, api_key_headers):
        response = client.get(f"{self.URL}?limit=3&offset=6", headers=api_key_headers)

        body = response.json()
        assert len(body["data"]) == 1
        assert body["pagination"]["hasMore"] is False

    def test_offset_beyond_total_returns_empty_page(self, client, seeded, api_key_headers):
        response = client.get(f"{self.URL}?offset=50", headers=api_key_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["data"] == []
        assert body["pagination"] == {"total": 7, "limit": 20, "offset": 50, "hasMore": False}

    def test_filters_by_chain_and_status(self, client, seeded, api_key_headers):
        response = client.get(
            f"{self.URL}?chainId=42161&status=closed", headers=api_key_headers
        )

        body = response.json()
        assert [p["config"]["nftId"] for p in body["data"]] == [100]
        assert body["meta"]["filters"] == {"status": "closed", "chainId": 42161}
        query = seeded.called("find_many")[0][0][1]
        assert query.chain_id == 42161
        assert query.status == "closed"

    def test_wide_integers_are_strings(self, client, seeded, api_key_headers):
        response = client.get(f"{self.URL}?limit=1", headers=api_key_headers)

        position = response.json()["data"][0]
        assert position["state"]["liquidity"] == str(UINT256_MAX)
        assert position["state"]["tokensOwed0"] == "0"
        assert position["currentValue"] == str(10**24)
        assert position["createdAt"] == "2025-01-15T12:00:00.000Z"

    def test_only_own_positions_are_listed(self, client, seeded, api_key_headers):
        response = client.get(f"{self.URL}?limit=100", headers=api_key_headers)

        assert all(p["userId"] == USER_ID for p in response.json()["data"])

    @pytest.mark.parametrize(
        "query",
        ["limit=0", "limit=101", "offset=-1", "chainId=abc", "status=open", "limit=2.5"],
    )
    def test_invalid_query_returns_400(self, client, services, api_key_headers, query):
        response = client.get(f"{self.URL}?{query}", headers=api_key_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["error"]["code"] == "VALIDATION_ERROR"
        assert body["error"]["message"] == "Invalid query parameters"
        assert services.positions.called("find_many") == []


@pytest.mark.api
class TestListPositions:
    URL = "/api/v1/positions/list"

    def test_defaults_are_echoed(self, client, seeded, api_key_headers):
        response = client.get(self.URL, headers=api_key_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"]["total"] == 7
        assert body["meta"]["filters"] == {
            "status": "all",
            "sortBy": "createdAt",
            "sortDirection": "desc",
        }

    def test_protocol_filter_is_split(self, client, services, seeded, api_key_headers):
        response = client.get(
            f"{self.URL}?protocols=uniswapv3&status=active&sortBy=currentValue&sortDirection=asc",
            headers=api_key_headers,
        )

        assert response.status_code == 200
        assert response.json()["meta"]["filters"] == {
            "status": "active",
            "sortBy": "currentValue",
            "sortDirection": "asc",
            "protocols": ["uniswapv3"],
        }
        query = services.position_list.called("list_positions")[0][0][1]
        assert query.protocols == ("uniswapv3",)
        assert query.sort_by == "currentValue"

    def test_unsupported_protocol_returns_400(self, client, api_key_headers):
        response = client.get(
            f"{self.URL}?protocols=uniswapv3,orca", headers=api_key_headers
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "Unsupported protocol filter"

    @pytest.mark.parametrize("query", ["sortBy=name", "sortDirection=up"])
    def test_invalid_sort_returns_400(self, client, api_key_headers, query):
        response = client.get(f"{self.URL}?{query}", headers=api_key_headers)

        assert response.status_code == 400


@pytest.mark.api
class TestImportUniswapV3Position:
    URL = "/api/v1/positions/uniswapv3/import"

    def test_import(self, client, services, api_key_headers):
        response = client.post(
            self.URL, headers=api_key_headers, json={"chainId": 1, "nftId": 4242}
        )

        assert response.status_code == 200
        assert response.json()["data"]["id"] == f"pos_{USER_ID}_1_4242"
        assert services.positions.called("import_position") == [((USER_ID, 1, 4242), {})]

    @pytest.mark.parametrize(
        ("error", "status", "code"),
        [
            (ValueError("Position 4242 does not exist"), 404, "POSITION_NOT_FOUND"),
            (
                ServiceError("owner mismatch", kind=ServiceErrorKind.NOT_OWNED),
                403,
                "FORBIDDEN",
            ),
            (ValueError("RPC request failed"), 400, "BAD_REQUEST"),
            (ValueError("Chain 5 is not configured"), 400, "CHAIN_NOT_SUPPORTED"),
        ],
    )
    def test_import_errors(self, client, services, api_key_headers, error, status, code):
        services.positions.fail("import_position", error)

        response = client.post(
            self.URL, headers=api_key_headers, json={"chainId": 1, "nftId": 4242}
        )

        assert response.status_code == status
        assert response.json()["error"]["code"] == code

    @pytest.mark.parametrize(
        "body", [{"chainId": 1}, {"chainId": 1, "nftId": 0}, {"chainId": "1", "nftId": 2}]
    )
    def test_invalid_body_returns_400(self, client, api_key_headers, body):
        response = client.post(self.URL, headers=api_key_headers, json=body)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.api
class TestCreateUniswapV3Position:
    URL = "/api/v1/positions/uniswapv3/1/777"

    def test_create_returns_200(self, client, services, api_key_headers):
        response = client.put(self.URL, headers=api_key_headers, json=_create_body())

        assert response.status_code == 200
        assert response.json()["data"]["id"] == f"pos_{USER_ID}_1_777"
        [(args, _)] = services.positions.called("create_position")
        user_id, chain_id, nft_id, data = args
        assert (user_id, chain_id, nft_id) == (USER_ID, 1, 777)
        assert data["pool_address"] == POOL_ADDRESS
        assert data["increase_event"]["liquidity"] == str(UINT256_MAX)
        assert "quote_token_address" not in data

    def test_create_twice_returns_conflict(self, client, api_key_headers):
        client.put(self.URL, headers=api_key_headers, json=_create_body())

        response = client.put(self.URL, headers=api_key_headers, json=_create_body())

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    def test_unknown_pool_returns_404(self, client, services, api_key_headers):
        services.positions.fail("create_position", ValueError("Pool not found"))

        response = client.put(self.URL, headers=api_key_headers, json=_create_body())

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "POOL_NOT_FOUND"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"poolAddress": "0x1"},
            {"tickLower": "-10"},
            {"increaseEvent": None},
        ],
    )
    def test_invalid_body_returns_400(self, client, services, api_key_headers, overrides):
        body = {k: v for k, v in _create_body(**overrides).items() if v is not None}

        response = client.put(self.URL, headers=api_key_headers, json=body)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert services.positions.called("create_position") == []

    def test_non_numeric_liquidity_returns_400(self, client, api_key_headers):
        body = _create_body()
        body["increaseEvent"]["liquidity"] = "1e18"

        response = client.put(self.URL, headers=api_key_headers, json=body)

        assert response.status_code == 400
        details = response.json()["error"]["details"]
        assert any(d["path"] == ["increaseEvent", "liquidity"] for d in details)

    @pytest.mark.parametrize("timestamp", [1736942400, "2025-01-15", "not-a-date"])
    def test_non_iso_timestamp_returns_400(self, client, services, api_key_headers, timestamp):
        body = _create_body()
        body["increaseEvent"]["timestamp"] = timestamp

        response = client.put(self.URL, headers=api_key_headers, json=body)

        assert response.status_code == 400
        details = response.json()["error"]["details"]
        assert [d["path"] for d in details] == [["increaseEvent", "timestamp"]]
        assert services.positions.called("create_position") == []

    @pytest.mark.parametrize(
        "path", ["0/777", "1/0", "abc/777", "1/-5", "1.0/777", "1/777.0", "1e0/777"]
    )
    def test_invalid_path_returns_400(self, client, api_key_headers, path):
        response = client.put(
            f"/api/v1/positions/uniswapv3/{path}", headers=api_key_headers, json=_create_body()
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.api
class TestUpdateUniswapV3Position:
    URL = "/api/v1/positions/uniswapv3/1/1"

    def test_append_events(self, client, seeded, api_key_headers):
        events = [
            _event(eventType="DECREASE_LIQUIDITY", logIndex=18, liquidity="100"),
            _event(eventType="COLLECT", logIndex=19, liquidity=None, recipient=WALLET_ADDRESS),
        ]

        response = client.patch(self.URL, headers=api_key_headers, json={"events": events})

        assert response.status_code == 200
        ledger = seeded.ledgers[f"pos_{USER_ID}_1_1"]
        assert [event["event_type"].value for event in ledger] == [
            "DECREASE_LIQUIDITY",
            "COLLECT",
        ]
        assert "liquidity" not in ledger[1]

    @pytest.mark.parametrize(
        ("event", "field", "message"),
        [
            (
                _event(eventType="COLLECT", liquidity=None),
                "recipient",
                "Recipient is required for COLLECT",
            ),
            (
                _event(liquidity=None),
                "liquidity",
                "Liquidity is required for INCREASE_LIQUIDITY",
            ),
            (
                _event(eventType="DECREASE_LIQUIDITY", recipient=WALLET_ADDRESS),
                "recipient",
                "Recipient is not allowed for DECREASE_LIQUIDITY",
            ),
        ],
    )
    def test_conditional_event_fields(
        self, client, seeded, api_key_headers, event, field, message
    ):
        response = client.patch(self.URL, headers=api_key_headers, json={"events": [event]})

        assert response.status_code == 400
        details = response.json()["error"]["details"]
        assert [d["path"] for d in details] == [["events", 0, field]]
        assert message in details[0]["message"]
        assert seeded.called("append_events") == []

    @pytest.mark.parametrize(
        "event",
        [
            _event(eventType="SWAP"),
            _event(logIndex=-1),
            _event(transactionHash="0x1234"),
            _event(amount0="-5"),
            _event(timestamp=1736942400),
            _event(timestamp="2025-01-15"),
            _event(timestamp="2025-01-15 12:00:00"),
        ],
    )
    def test_invalid_event_returns_400(self, client, api_key_headers, event):
        response = client.patch(self.URL, headers=api_key_headers, json={"events": [event]})

        assert response.status_code == 400

    def test_empty_event_list_returns_400(self, client, api_key_headers):
        response = client.patch(self.URL, headers=api_key_headers, json={"events": []})

        assert response.status_code == 400

    def test_out_of_order_events_return_400(self, client, seeded, api_key_headers):
        seeded.fail(
            "append_events",
            ServiceError("Event 21000000/4/17 out of order", kind=ServiceErrorKind.EVENT_ORDER),
        )

        response = client.patch(
            self.URL, headers=api_key_headers, json={"events": [_event()]}
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "BAD_REQUEST"
        assert error["message"] == "Events must be appended in blockchain order"

    def test_unknown_position_returns_404(self, client, services, api_key_headers):
        response = client.patch(
            "/api/v1/positions/uniswapv3/1/31337",
            headers=api_key_headers,
            json={"events": [_event()]},
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "POSITION_NOT_FOUND"


@pytest.mark.api
class TestGetUniswapV3Position:
    def test_get_refreshes_position(self, client, seeded, api_key_headers):
        response = client.get("/api/v1/positions/uniswapv3/1/2", headers=api_key_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["refreshed"] is True
        assert seeded.called("refresh") == [((f"pos_{USER_ID}_1_2",), {})]

    def test_missing_position_returns_404(self, client, seeded, api_key_headers):
        response = client.get("/api/v1/positions/uniswapv3/1/31337", headers=api_key_headers)

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "POSITION_NOT_FOUND"
        assert error["details"] == "No Uniswap V3 position found for chainId 1 and nftId 31337"
        assert seeded.called("refresh") == []

    def test_other_users_position_returns_404(self, client, seeded, api_key_headers):
        response = client.get("/api/v1/positions/uniswapv3/1/999", headers=api_key_headers)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "POSITION_NOT_FOUND"

    def test_refresh_failure_returns_400(self, client, seeded, api_key_headers):
        seeded.fail("refresh", ValueError("Failed to read position from NFPM contract"))

        response = client.get("/api/v1/positions/uniswapv3/1/2", headers=api_key_headers)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == (
            "Failed to refresh position data from blockchain"
        )


@pytest.mark.api
class TestDeleteUniswapV3Position:
    def test_delete_existing(self, client, seeded, api_key_headers):
        response = client.delete("/api/v1/positions/uniswapv3/1/3", headers=api_key_headers)

        assert response.status_code == 200
        assert response.json()["data"] == {}
        assert (USER_ID, "uniswapv3/1/3") not in seeded.positions

    def test_delete_is_idempotent(self, client, seeded, api_key_headers):
        first = client.delete("/api/v1/positions/uniswapv3/1/3", headers=api_key_headers)
        second = client.delete("/api/v1/positions/uniswapv3/1/3", headers=api_key_headers)

        assert first.status_code == second.status_code == 200
        assert second.json()["data"] == {}

    def test_not_found_from_service_still_succeeds(self, client, seeded, api_key_headers):
        seeded.fail("delete_by_position_hash", ValueError("Position not found"))

        response = client.delete("/api/v1/positions/uniswapv3/1/3", headers=api_key_headers)

        assert response.status_code == 200

    def test_other_users_position_is_untouched(self, client, seeded, api_key_headers):
        response = client.delete("/api/v1/positions/uniswapv3/1/999", headers=api_key_headers)

        assert response.status_code == 200
        assert (OTHER_USER_ID, "uniswapv3/1/999") in seeded.positions


@pytest.mark.api
class TestPositionLedgerAndApr:
    def test_ledger_after_append(self, client, seeded, api_key_headers):
        client.patch(
            "/api/v1/positions/uniswapv3/1/1",
            headers=api_key_headers,
            json={"events": [_event()]},
        )

        response = client.get(
            "/api/v1/positions/uniswapv3/1/1/ledger", headers=api_key_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["meta"]["count"] == 1
        event = body["data"][0]
        assert event["eventType"] == "INCREASE_LIQUIDITY"
        assert event["liquidity"] == str(UINT256_MAX)
        assert event["timestamp"] == "2025-01-15T12:00:00.000Z"

    def test_apr_periods(self, client, seeded, api_key_headers):
        response = client.get("/api/v1/positions/uniswapv3/1/1/apr", headers=api_key_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["meta"]["count"] == 1
        assert body["data"][0]["collectedFeeValue"] == str(5 * 10**18)
        assert body["data"][0]["aprBps"] == 1234

    @pytest.mark.parametrize("suffix", ["ledger", "apr"])
    def test_missing_position_returns_404(self, client, seeded, api_key_headers, suffix):
        response = client.get(
            f"/api/v1/positions/uniswapv3/1/999/{suffix}", headers=api_key_headers
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "POSITION_NOT_FOUND"

"""Unit tests for SessionTokenService (session JWT verification)."""

from datetime import UTC, datetime, timedelta

import jwt
import pytest
from freezegun import freeze_time

from midcurve_api.core.result import Failure, Success
from midcurve_api.infrastructure.security.session_token_service import (
    INVALID_SESSION,
    MISSING_SUBJECT,
    SessionTokenService,
)

SECRET = "unit-test-session-secret-32-bytes-long"


def _token(claims, secret=SECRET, algorithm="HS256"):
    return jwt.encode(claims, secret, algorithm=algorithm)


@pytest.fixture
def service():
    return SessionTokenService(secret_key=SECRET)


@pytest.mark.unit
class TestDecode:
    def test_valid_token(self, service):
        result = service.decode(_token({"sub": "user_1"}))

        assert result == Success(value={"sub": "user_1"})

    def test_wrong_secret(self, service):
        result = service.decode(_token({"sub": "user_1"}, secret="x" * 32))

        assert result == Failure(error=INVALID_SESSION)

    def test_garbage(self, service):
        assert isinstance(service.decode("not.a.jwt"), Failure)

    @freeze_time("2025-01-15 12:00:00")
    def test_expired(self, service):
        token = _token({"sub": "user_1", "exp": datetime.now(UTC) - timedelta(seconds=1)})

        assert service.decode(token) == Failure(error=INVALID_SESSION)

    def test_algorithm_is_pinned(self, service):
        token = _token({"sub": "user_1"}, algorithm="HS512")

        assert isinstance(service.decode(token), Failure)

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            SessionTokenService(secret_key="")


@pytest.mark.unit
class TestResolveUser:
    def test_full_claims(self, service):
        token = _token(
            {
                "sub": "user_1",
                "name": "Alice",
                "email": "alice@example.com",
                "picture": "https://example.com/a.png",
                "wallets": [
                    {
                        "id": "wallet_1",
                        "address": "0x742d35Cc6634C0532925a3b844Bc454e4438f44e",
                        "chainId": 1,
                        "isPrimary": True,
                        "createdAt": "2025-01-15T12:00:00.000Z",
                    }
                ],
            }
        )

        result = service.resolve_user(token)

        assert isinstance(result, Success)
        user = result.value
        assert user.id == "user_1"
        assert user.name == "Alice"
        assert user.image == "https://example.com/a.png"
        assert user.auth_method == "session"
        assert len(user.wallets) == 1
        wallet = user.wallets[0]
        assert wallet.chain_id == 1
        assert wallet.is_primary is True
        assert wallet.user_id == "user_1"
        assert wallet.created_at == datetime(2025, 1, 15, 12, tzinfo=UTC)
        assert wallet.updated_at == wallet.created_at

    def test_id_claim_fallback(self, service):
        result = service.resolve_user(_token({"id": "user_9"}))

        assert isinstance(result, Success)
        assert result.value.id == "user_9"
        assert result.value.wallets == ()

    def test_missing_subject(self, service):
        assert service.resolve_user(_token({"name": "Nobody"})) == Failure(error=MISSING_SUBJECT)

    def test_malformed_wallet_claim(self, service):
        token = _token({"sub": "user_1", "wallets": [{"address": "0xabc"}]})

        assert service.resolve_user(token) == Failure(error=INVALID_SESSION)

    @pytest.mark.parametrize(
        "wallets",
        [
            ["wallet_1"],
            "wallet_1",
            [{"id": "w", "address": "0xabc", "chainId": 1, "createdAt": 10**20}],
        ],
    )
    def test_wallet_claim_with_wrong_shape(self, service, wallets):
        token = _token({"sub": "user_1", "wallets": wallets})

        assert service.resolve_user(token) == Failure(error=INVALID_SESSION)

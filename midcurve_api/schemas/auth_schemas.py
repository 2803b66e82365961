"""Authentication request schemas: wallet linking and API keys."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from midcurve_api.schemas.common_schemas import ADDRESS_PATTERN, CamelModel


class LinkWalletRequest(CamelModel):
    """Body of POST /v1/auth/link-wallet.

    Attributes:
        message: SIWE message fields serialized as a JSON string.
        signature: Wallet signature over the message.
    """

    message: str = Field(..., min_length=1, description="SIWE message (JSON string)")
    signature: str = Field(..., min_length=1, description="Signature over the message")


class SiweMessage(BaseModel):
    """Parsed Sign-In-With-Ethereum message (EIP-4361 fields)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    domain: str = Field(..., min_length=1)
    address: str = Field(..., pattern=ADDRESS_PATTERN)
    statement: str | None = None
    uri: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)
    chain_id: int = Field(..., alias="chainId", gt=0)
    nonce: str = Field(..., min_length=1)
    issued_at: datetime | None = Field(default=None, alias="issuedAt")
    expiration_time: datetime | None = Field(default=None, alias="expirationTime")
    not_before: datetime | None = Field(default=None, alias="notBefore")
    request_id: str | None = Field(default=None, alias="requestId")
    resources: list[str] | None = None


class CreateApiKeyRequest(CamelModel):
    """Body of POST /v1/user/api-keys."""

    name: str = Field(..., min_length=1, max_length=100, description="Human-readable key name")

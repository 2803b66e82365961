"""ERC-20 token request schemas."""

from typing import Self

from pydantic import Field, model_validator

from midcurve_api.schemas.common_schemas import ADDRESS_PATTERN, CamelModel, QueryInt

MAX_SEARCH_RESULTS = 10


class DiscoverErc20TokenRequest(CamelModel):
    """Body of POST /v1/tokens/erc20."""

    address: str = Field(..., pattern=ADDRESS_PATTERN, description="Token contract address")
    chain_id: int = Field(..., alias="chainId", gt=0, strict=True, description="EVM chain ID")


class SearchErc20TokensQuery(CamelModel):
    """Query of GET /v1/tokens/erc20/search.

    At least one of symbol, name or address must be present.
    """

    chain_id: QueryInt = Field(..., alias="chainId", gt=0)
    symbol: str | None = Field(default=None, min_length=1)
    name: str | None = Field(default=None, min_length=1)
    address: str | None = Field(default=None, pattern=ADDRESS_PATTERN)

    @model_validator(mode="after")
    def require_search_term(self) -> Self:
        if self.symbol is None and self.name is None and self.address is None:
            raise ValueError("At least one of symbol, name, or address must be provided")
        return self

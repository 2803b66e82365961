"""Uniswap V3 pool request schemas."""

from typing import Any

from pydantic import Field, field_validator

from midcurve_api.schemas.common_schemas import CamelModel, QueryInt


class GetUniswapV3PoolQuery(CamelModel):
    """Query of GET /v1/pools/uniswapv3/{address}.

    Attributes:
        chain_id: Chain the pool lives on.
        enrich_metrics: Fetch TVL/volume/fees from the subgraph (best effort).
    """

    chain_id: QueryInt = Field(..., alias="chainId", gt=0)
    enrich_metrics: bool = Field(default=False, alias="enrichMetrics")

    @field_validator("enrich_metrics", mode="before")
    @classmethod
    def parse_flag(cls, v: Any) -> bool:
        """Only the literal string 'true' enables the flag."""
        if isinstance(v, bool):
            return v
        return v == "true"

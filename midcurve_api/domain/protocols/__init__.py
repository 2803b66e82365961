"""Domain protocols (ports) package.

Services-layer adapters implement these protocols without inheritance.
"""

from midcurve_api.domain.protocols.logger_protocol import LoggerProtocol
from midcurve_api.domain.protocols.service_protocols import (
    ApiKeyServiceProtocol,
    Erc20TokenServiceProtocol,
    NonceServiceProtocol,
    PositionListServiceProtocol,
    SiweVerifierProtocol,
    SubgraphClientProtocol,
    UniswapV3PoolServiceProtocol,
    UniswapV3PositionServiceProtocol,
    UserServiceProtocol,
)

__all__ = [
    "ApiKeyServiceProtocol",
    "Erc20TokenServiceProtocol",
    "LoggerProtocol",
    "NonceServiceProtocol",
    "PositionListServiceProtocol",
    "SiweVerifierProtocol",
    "SubgraphClientProtocol",
    "UniswapV3PoolServiceProtocol",
    "UniswapV3PositionServiceProtocol",
    "UserServiceProtocol",
]

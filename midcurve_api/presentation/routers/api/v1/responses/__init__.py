"""Response envelope construction."""

from midcurve_api.presentation.routers.api.v1.responses.envelope_builder import (
    EnvelopeBuilder,
    utc_timestamp,
)

__all__ = [
    "EnvelopeBuilder",
    "utc_timestamp",
]

"""Midcurve API: HTTP layer for concentrated-liquidity position tracking."""

__version__ = "0.1.0"

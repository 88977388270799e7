"""Capture, validate and diff concentrated-liquidity positions from rendered DeFi pages."""

__version__ = "0.1.0"

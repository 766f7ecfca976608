"""Services package: provides the marketplace session controller."""

from .marketplace import MarketplaceSession  # noqa: F401

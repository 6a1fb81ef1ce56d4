"""Hotel commission agreements and calculation service."""

__version__ = "1.0.0"

"""Copy-trading portfolio analytics service."""

__version__ = "0.1.0"

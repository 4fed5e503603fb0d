"""Multi-channel notification dispatcher."""

__version__ = "0.1.0"

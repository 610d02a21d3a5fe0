"""User management service with per-site permissions."""

__version__ = "0.1.0"

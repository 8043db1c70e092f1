"""check-certificates: HTTPS certificate expiration checker."""

__version__ = "2.0.0"

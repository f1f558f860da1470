"""Per-client login rate limiting for the blog backend."""

__version__ = "0.1.0"

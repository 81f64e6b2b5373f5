"""BIDFLOW matcher: score tender announcements against a product catalog."""

__version__ = "0.1.0"

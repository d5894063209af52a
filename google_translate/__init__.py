"""Google Translate v2 REST client."""
__version__ = "0.1.0"

"""A lightweight threaded HTTP server for serving and receiving static files."""

__version__ = "0.1.1"
__all__ = ["__version__"]
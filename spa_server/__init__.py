"""Static asset server with client-side routing fallback for single-page apps."""

__version__ = "1.0.0"

"""HTTP server for the extension relay."""

from extension_relay import __version__

__all__ = ["__version__"]

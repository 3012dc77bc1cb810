"""npaperbot: resolve WG21 paper mentions in chat messages."""

__version__ = "0.1.0"

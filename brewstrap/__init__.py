"""brewstrap — interactive macOS development environment bootstrapper."""

__version__ = "0.1.0"

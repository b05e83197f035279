"""Discover, browse and run goals against Maven projects inside workspace folders."""

__version__ = "0.3.0"

"""Tunebox - authentication service and session client for the music player."""

__version__ = "1.0.0"

"""Application layer: use cases orchestrating the auth core."""

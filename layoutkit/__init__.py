"""Compose HTML template fragments into a shared layout and render pages against it."""

__version__ = "0.1.0"

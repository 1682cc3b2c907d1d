"""Peer-to-peer skill exchange API."""

__version__ = "1.0.0"

"""Clients for external services."""

from .storage import HttpKeyValueStore

__all__ = ["HttpKeyValueStore"]

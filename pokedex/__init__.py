"""Pokédex browsing client: remote sync, favorites and filtered views."""

__version__ = "0.1.0"

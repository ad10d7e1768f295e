"""Chessmatch — two-player chess with terminal and desktop front-ends."""

__version__ = "0.1.0"

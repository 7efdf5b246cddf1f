"""Tipstage - load, cross-check and render a Tip of the Week collection."""

__version__ = "0.1.0"

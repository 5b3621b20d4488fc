"""Ordered, stateful browser journeys for the blog application."""

__version__ = "1.0.0"

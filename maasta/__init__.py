"""Maasta backend: artist profiles, auditions, events and swipe networking."""

__version__ = "1.0.0"

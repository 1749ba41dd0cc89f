"""Joke Drop — joke submission service with a follow graph and a moderation queue."""

__version__ = "0.1.0"

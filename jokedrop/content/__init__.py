"""Jokes and the moderation pipeline."""

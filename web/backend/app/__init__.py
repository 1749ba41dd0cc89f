"""HTTP dispatch layer for Joke Drop."""

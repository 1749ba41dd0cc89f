"""Social graph: symmetric follow edges and suggestions."""

"""Control panels (axis selection, threshold)."""

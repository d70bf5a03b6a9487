"""Rendering side: graphics backends and GPU state descriptions."""

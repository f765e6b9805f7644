"""Rendering: component trees, the server pipeline, and full documents."""

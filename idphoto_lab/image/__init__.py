"""Image generation engines."""

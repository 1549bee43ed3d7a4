"""Schema statistics."""

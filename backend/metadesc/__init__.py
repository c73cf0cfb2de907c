"""AI Meta Description service."""

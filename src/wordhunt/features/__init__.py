"""Feature packages layered on top of the core."""

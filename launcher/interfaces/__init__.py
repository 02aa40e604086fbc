"""External interfaces for the launcher settings core."""

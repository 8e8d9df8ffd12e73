"""Individual command implementations."""

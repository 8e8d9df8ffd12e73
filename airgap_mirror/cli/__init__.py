"""Command-line interface for the air-gapped mirroring tool."""

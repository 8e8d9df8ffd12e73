"""Tools for turning upstream git repositories into air-gapped mirrors."""

__version__ = "1.0.0"

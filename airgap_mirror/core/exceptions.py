"""
Custom exceptions for the air-gapped mirroring project.

This module provides a hierarchy of exceptions used throughout the project.
"""

class MirrorError(Exception):
    """Base exception for mirroring operations."""

class ConfigError(MirrorError):
    """Configuration related errors."""

class OpenError(MirrorError):
    """The path is not a valid git repository or could not be opened."""

class HeadResolutionError(MirrorError):
    """HEAD could not be resolved to a commit, e.g. no commits yet."""

class RemovalError(MirrorError):
    """The reference store rejected a deletion."""

class RestoreError(MirrorError):
    """The reference store rejected setting a reference."""

class ProvisioningError(MirrorError):
    """Mirror host API related errors."""

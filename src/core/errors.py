"""hits2mcpl exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Only I/O and container failures are fatal; record rejections are values.
"""

from __future__ import annotations


class Hits2McplError(Exception):
    """Base exception for all hits2mcpl failures."""


class ConfigError(Hits2McplError):
    """Raised for invalid runtime configuration."""


class InputReadError(Hits2McplError):
    """Raised when the hit list cannot be opened or read."""


class ContainerError(Hits2McplError):
    """Raised when creating, appending to, or closing the container fails."""


class ContainerStateError(ContainerError):
    """Raised when container operations are called out of lifecycle order."""


class DependencyError(Hits2McplError):
    """Raised when libmcpl or the mcpl reader is not available."""

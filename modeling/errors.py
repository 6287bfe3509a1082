"""
SurfLab - Exceptions
====================

Only two failure kinds cross a component boundary:

- Format errors (malformed Bézier control file, trigonometric table token
  mismatch). The caller's model is left in its pre-call state.
- Capability errors (derivative order or degree beyond what a basis
  supports). These are contract violations and are logged before raising.

Degenerate geometry never raises; the estimators substitute neutral values.
"""

from typing import Optional


class SurfLabError(Exception):
    """Base class for all SurfLab errors."""
    pass


class GeometryFormatError(SurfLabError, ValueError):
    """Raised when a plain-text geometry file cannot be parsed."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class BezierFormatError(GeometryFormatError):
    """Malformed Bézier control-point file."""
    pass


class TrigoTableFormatError(GeometryFormatError):
    """Malformed trigonometric coefficient file."""
    pass


class CapabilityExceededError(SurfLabError, RuntimeError):
    """Raised when a basis is asked for more than it supports."""

    def __init__(self, what: str, requested, supported):
        self.what = what
        self.requested = requested
        self.supported = supported
        super().__init__(f"{what}: requested {requested}, supported {supported}")


class MeshIOError(SurfLabError, IOError):
    """The external mesh reader/writer failed."""
    pass


class MeshTopologyError(SurfLabError, ValueError):
    """Face input does not describe a triangle mesh."""
    pass

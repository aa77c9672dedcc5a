# pathpaint/core/errors.py
#!/usr/bin/env python3
"""
Errors raised by the core.

A search that exhausts its open set is not an error: it ends with a
StepResult whose status is "no_path".
"""


class PathpaintError(Exception):
    """Base class for everything the core raises."""


class InvalidDimensions(PathpaintError, ValueError):
    def __init__(self, rows, cols, minimum: int):
        super().__init__(
            f"grid must be at least {minimum}x{minimum} integers, got {rows!r}x{cols!r}"
        )
        self.rows = rows
        self.cols = cols


class MissingEndpoints(PathpaintError):
    def __init__(self, message: str = "both a start and an end cell must be set"):
        super().__init__(message)


class InvalidWeight(PathpaintError, ValueError):
    """Weight is not an integer >= 1. Edits swallow this and become no-ops."""


class CorruptRecord(PathpaintError, ValueError):
    """Persisted grid data is missing fields or inconsistent."""

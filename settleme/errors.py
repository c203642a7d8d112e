"""Exception types raised by the export engine."""

from __future__ import annotations


class ExportError(Exception):
    """Base class for all export failures."""


class NotFoundError(ExportError, LookupError):
    """The requested user or group does not exist in the store."""

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier


class MalformedRequestError(ExportError, ValueError):
    """Scope, report type or format is missing or not recognized."""


class StoreError(ExportError, RuntimeError):
    """The backing data file could not be read."""


__all__ = ["ExportError", "NotFoundError", "MalformedRequestError", "StoreError"]

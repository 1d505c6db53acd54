"""
Custom exceptions for the export subsystem.
"""
from typing import Any, Dict, Optional


class ShowExportException(Exception):
    """Base exception for all export exceptions."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ExportIOError(ShowExportException):
    """Writing an output file or copying an asset failed."""

    def __init__(self, path: Any, message: str):
        super().__init__(message, details={"path": str(path)})
        self.path = path


class MissingSourceFileError(ShowExportException):
    """An asset referenced by a project or template is gone."""

    def __init__(self, path: Any, reason: Optional[str] = None):
        message = f"Source file {path} could not be read"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, details={"path": str(path)})
        self.path = path


class UnparsableDocumentError(ShowExportException):
    """A show file on disk is not a valid native show document."""

    def __init__(self, path: Any, reason: str):
        super().__init__(f"Could not parse {path}: {reason}", details={"path": str(path)})
        self.path = path


class UnsupportedExportTypeError(ShowExportException):
    """Export request kind (or batch sub-format) is not handled."""

    def __init__(self, kind: Any):
        super().__init__(f"Unsupported export type: {kind}", details={"kind": str(kind)})
        self.kind = kind


class RenderingHostBusyError(ShowExportException):
    """A paginated document export is already running."""

    def __init__(self, message: str = "A PDF export is already in progress"):
        super().__init__(message)


class RenderingError(ShowExportException):
    """Rendering host failed to load, closed early, or sent an unusable reply."""

    def __init__(self, message: str, channel: Optional[str] = None):
        details = {"channel": channel} if channel else {}
        super().__init__(message, details=details)

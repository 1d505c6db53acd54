"""
Domain schemas for the export subsystem.
"""

from .export import *
from .show import *

__all__ = [
    # Show schemas
    "TextRun",
    "Line",
    "Item",
    "Slide",
    "LayoutSlideRef",
    "Layout",
    "ShowSettings",
    "Show",
    "ProjectOrTemplateFile",

    # Export schemas
    "ExportChannel",
    "ExportType",
    "ExportData",
    "ExportMessage",
    "ExportRequest",
    "ShowExportRequest",
    "TextExportRequest",
    "PdfExportRequest",
    "ProjectExportRequest",
    "TemplateExportRequest",
    "JSONExportRequest",
    "UsageExportRequest",
    "AllShowsExportRequest",
    "HostChannel",
    "HostMessageKind",
    "HostMessage",
    "PDFOptions",
]

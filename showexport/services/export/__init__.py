"""
Export Module.

Provides export orchestration with:
- Collision-free output paths
- Plain text flattening of shows
- Native show, JSON and usage dumps
- Project/template archive bundles
- PDF rendering through an out-of-process host
- Whole-collection batch exports
"""
from typing import Optional

from showexport.core.config import settings
from showexport.core.logging import get_logger, setup_logging
from showexport.domain.interfaces.export_services import (
    IAlertChannel,
    IFolderPicker,
    IFolderRevealer,
)

from .archive import ArchiveBuilder
from .paths import allocate_unique_path, data_folder, ensure_folder, time_point_string
from .rendering import HostFactory, RenderingCoordinator, RenderState
from .router import ExportRouter
from .shows import load_show_collection, load_shows_by_id, parse_show
from .text import collapse_blank_lines, flatten_show, iter_flat_slides, render_slide_block
from .writer import ExportSession, FileWriter


def create_export_router(
    alert_channel: IAlertChannel,
    folder_revealer: Optional[IFolderRevealer] = None,
    folder_picker: Optional[IFolderPicker] = None,
    host_factory: Optional[HostFactory] = None,
) -> ExportRouter:
    """Create an export router with a fresh session and configure logging."""
    setup_logging()
    get_logger(__name__).info(
        "Export router created",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        pdf_enabled=host_factory is not None,
    )

    session = ExportSession(alert_channel, folder_revealer)
    writer = FileWriter(session)

    rendering_coordinator = None
    if host_factory is not None:
        rendering_coordinator = RenderingCoordinator(writer, host_factory)

    return ExportRouter(
        session,
        rendering_coordinator=rendering_coordinator,
        folder_picker=folder_picker,
        writer=writer,
    )


__all__ = [
    # Main classes
    "ExportRouter",
    "ExportSession",
    "FileWriter",
    "ArchiveBuilder",
    "RenderingCoordinator",
    "RenderState",

    # Functions
    "allocate_unique_path",
    "data_folder",
    "ensure_folder",
    "time_point_string",
    "flatten_show",
    "iter_flat_slides",
    "render_slide_block",
    "collapse_blank_lines",
    "load_show_collection",
    "load_shows_by_id",
    "parse_show",

    # Convenience functions
    "create_export_router",
]

"""
Export router: entry point for export requests from the controlling UI.

Resolves the destination folder, turns the ``{channel, data}`` message into
a typed request and hands it to the matching exporter. Errors are reported on
the alert channel; a request never raises back into the UI layer.
"""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from showexport.core.config import Settings, settings as default_settings
from showexport.core.exceptions import ShowExportException, UnsupportedExportTypeError
from showexport.core.logging import get_logger, log_error_details
from showexport.core.messages import AlertKey, AlertMessages
from showexport.domain.interfaces.export_services import IFolderPicker
from showexport.domain.schemas.export import (
    AllShowsExportRequest,
    ExportChannel,
    ExportMessage,
    ExportRequest,
    ExportType,
    JSONExportRequest,
    PdfExportRequest,
    ProjectExportRequest,
    ShowExportRequest,
    TemplateExportRequest,
    TextExportRequest,
    UsageExportRequest,
)
from showexport.domain.schemas.show import Show
from showexport.services.export.archive import ArchiveBuilder
from showexport.services.export.paths import data_folder, ensure_folder, time_point_string
from showexport.services.export.rendering import RenderingCoordinator
from showexport.services.export.shows import load_show_collection, load_shows_by_id
from showexport.services.export.text import flatten_show
from showexport.services.export.writer import BatchItem, ExportSession, FileWriter


class ExportRouter:
    """
    Dispatches export requests to the text, native, archive and PDF exporters.
    """

    def __init__(
        self,
        session: ExportSession,
        rendering_coordinator: Optional[RenderingCoordinator] = None,
        folder_picker: Optional[IFolderPicker] = None,
        writer: Optional[FileWriter] = None,
        archive_builder: Optional[ArchiveBuilder] = None,
        settings: Optional[Settings] = None,
    ):
        self.logger = get_logger(self.__class__.__name__)
        self.session = session
        self.settings = settings or default_settings
        self.writer = writer or FileWriter(session)
        self.archive_builder = archive_builder or ArchiveBuilder(self.writer, self.settings.ARCHIVE_MANIFEST_NAME)
        self.rendering_coordinator = rendering_coordinator
        self.folder_picker = folder_picker

    async def handle(self, message: Union[ExportMessage, Dict[str, Any]]) -> None:
        """
        Handle one inbound export message.

        Args:
            message: ``{channel, data}`` message or its parsed model
        """
        channel = message.channel if isinstance(message, ExportMessage) else message.get("channel")

        try:
            if not isinstance(message, ExportMessage):
                message = ExportMessage.model_validate(message)
            if message.data is None:
                return

            data_path = await self._resolve_data_path(message.data.path)
            if data_path is None:
                return

            export_path = data_folder(data_path, self.settings.EXPORTS_FOLDER_NAME)

            shows = None
            if message.channel == ExportChannel.GENERATE and message.data.show_ids and message.data.shows_path:
                shows = await load_shows_by_id(message.data.show_ids, message.data.shows_path)

            request = message.to_request(export_path, shows=shows)
            await self.dispatch(request)
        except (ShowExportException, ValidationError, OSError) as e:
            self.logger.error("Export request failed", **log_error_details(e, channel=channel))
            await self.session.alert(AlertMessages.from_error(e))

    async def _resolve_data_path(self, path: Optional[str]) -> Optional[Path]:
        if path:
            return Path(path)

        if self.folder_picker is None:
            if self.settings.DEFAULT_DATA_PATH is None:
                self.logger.warning("No destination given and no folder picker available")
            return self.settings.DEFAULT_DATA_PATH

        selected = await self.folder_picker.select_folder()
        if not selected:
            return None

        await self.folder_picker.persist_data_path(Path(selected))
        return Path(selected)

    async def dispatch(self, request: ExportRequest) -> Any:
        """
        Run a typed export request.

        Raises:
            UnsupportedExportTypeError: Request kind has no exporter
        """
        self.logger.info("Dispatching export", type=request.type.value, path=str(request.path))

        if isinstance(request, ShowExportRequest):
            return await self.export_shows(request.shows, request.path)
        if isinstance(request, TextExportRequest):
            return await self.export_text(request.shows, request.path)
        if isinstance(request, PdfExportRequest):
            return await self.export_pdf(request.payload)
        if isinstance(request, ProjectExportRequest):
            return await self.export_project(request)
        if isinstance(request, TemplateExportRequest):
            return await self.export_template(request)
        if isinstance(request, JSONExportRequest):
            name = request.name or _content_name(request.content, self.settings.UNNAMED_EXPORT_NAME)
            return await self.export_json(request.content, request.extension, request.path, name)
        if isinstance(request, UsageExportRequest):
            return await self.export_usage(request.content, request.path)
        if isinstance(request, AllShowsExportRequest):
            return await self.export_all_shows(request)

        raise UnsupportedExportTypeError(getattr(request, "type", type(request).__name__))

    # ----- SHOW -----

    async def export_shows(self, shows: List[Show], path: Path) -> List[Optional[Path]]:
        """Native ``.show`` files: ``[id, show]`` pretty-printed JSON."""
        items: List[BatchItem] = [
            (
                path / show.display_name,
                self.settings.SHOW_EXTENSION,
                json.dumps(show.to_native(), indent=self.settings.JSON_INDENT),
            )
            for show in shows
        ]
        return await self.writer.write_batch(items, path, encoding="utf-8")

    # ----- TXT -----

    async def export_text(self, shows: List[Show], path: Path) -> List[Optional[Path]]:
        items: List[BatchItem] = [
            (path / show.display_name, self.settings.TEXT_EXTENSION, flatten_show(show))
            for show in shows
        ]
        return await self.writer.write_batch(items, path, encoding="utf-8")

    # ----- PDF -----

    async def export_pdf(self, payload: Dict[str, Any]) -> List[Path]:
        if self.rendering_coordinator is None:
            raise UnsupportedExportTypeError(ExportType.PDF.value)
        return await self.rendering_coordinator.export(payload)

    # ----- PROJECT / TEMPLATE -----

    async def export_project(self, request: ProjectExportRequest) -> Optional[Path]:
        await self.session.alert(AlertKey.EXPORTING.value)

        return await self._build_archive(
            request.file.manifest(),
            request.file.files,
            request.path,
            request.name,
            self.settings.PROJECT_EXTENSION,
        )

    async def export_template(self, request: TemplateExportRequest) -> Optional[Path]:
        await self.session.alert(AlertKey.EXPORTING.value)

        files = request.file.files
        # plain templates are stored without the empty asset list, pretty-printed
        manifest = request.file.manifest(include_files=bool(files))
        indent = None if files else self.settings.JSON_INDENT

        return await self._build_archive(
            manifest,
            files,
            request.path,
            request.name,
            self.settings.TEMPLATE_EXTENSION,
            indent=indent,
        )

    async def _build_archive(
        self,
        manifest: Dict[str, Any],
        files: List[str],
        path: Path,
        name: str,
        extension: str,
        indent: Optional[int] = None,
    ) -> Optional[Path]:
        try:
            output = await self.archive_builder.build(manifest, files, path / name, extension, indent=indent)
        except ShowExportException as e:
            await self.session.done_writing(e, path)
            return None

        await self.session.done_writing(None, path)
        return output

    # ----- JSON -----

    async def export_json(self, content: Any, extension: str, path: Path, name: str) -> Optional[Path]:
        return await self.writer.write_and_notify(
            path / name,
            extension,
            json.dumps(content, indent=self.settings.JSON_INDENT),
            path,
            encoding="utf-8",
        )

    async def export_usage(self, content: Any, path: Path) -> Optional[Path]:
        usage_path = ensure_folder(path / self.settings.USAGE_FOLDER_NAME)
        return await self.export_json(content, self.settings.JSON_EXTENSION, usage_path, time_point_string())

    # ----- ALL SHOWS -----

    async def export_all_shows(self, request: AllShowsExportRequest) -> List[Optional[Path]]:
        """
        Export every show in a folder as ``show`` or ``txt``.

        Shows that fail to parse are skipped. Output goes to a new time-stamped
        subfolder; when nothing loads, only the "0 exported" notice is sent.
        """
        if request.format not in self.settings.BATCHABLE_SHOW_FORMATS:
            raise UnsupportedExportTypeError(f"{ExportType.ALL_SHOWS.value}/{request.format}")

        shows = await load_show_collection(request.shows_path)
        if not shows:
            await self.session.alert(AlertMessages.exported_count(0))
            return []

        # custom folder to organize the amount of files
        batch_path = ensure_folder(request.path / time_point_string())

        if request.format == ExportType.SHOW.value:
            return await self.dispatch(ShowExportRequest(path=batch_path, shows=shows))
        return await self.dispatch(TextExportRequest(path=batch_path, shows=shows))


def _content_name(content: Any, fallback: str) -> str:
    if isinstance(content, dict) and content.get("name"):
        return str(content["name"])
    return fallback

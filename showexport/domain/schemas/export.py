"""
Schemas for export requests and rendering host messages.
"""
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from showexport.core.config import settings
from showexport.core.exceptions import UnsupportedExportTypeError
from showexport.domain.schemas.show import ProjectOrTemplateFile, Show


class ExportChannel(str, Enum):
    """Inbound request channels."""
    TEMPLATE = "TEMPLATE"
    THEME = "THEME"
    USAGE = "USAGE"
    ALL_SHOWS = "ALL_SHOWS"
    GENERATE = "GENERATE"


class ExportType(str, Enum):
    """Export kinds the router dispatches on."""
    PDF = "pdf"
    SHOW = "show"
    TXT = "txt"
    PROJECT = "project"
    TEMPLATE = "template"
    USAGE = "usage"
    ALL_SHOWS = "all_shows"
    GENERIC_JSON = "generic_json"


# GENERATE sub-types
GENERATE_TYPES = (ExportType.PDF, ExportType.SHOW, ExportType.TXT, ExportType.PROJECT)


class _Request(BaseModel):
    path: Path


class ShowExportRequest(_Request):
    """Write each show as a native ``.show`` file."""
    type: Literal[ExportType.SHOW] = ExportType.SHOW
    shows: List[Show] = Field(default_factory=list)


class TextExportRequest(_Request):
    """Write each show as flattened plain text."""
    type: Literal[ExportType.TXT] = ExportType.TXT
    shows: List[Show] = Field(default_factory=list)


class PdfExportRequest(_Request):
    """Render shows through the rendering host; payload is pushed to it as is."""
    type: Literal[ExportType.PDF] = ExportType.PDF
    payload: Dict[str, Any] = Field(default_factory=dict)


class ProjectExportRequest(_Request):
    type: Literal[ExportType.PROJECT] = ExportType.PROJECT
    name: str
    file: ProjectOrTemplateFile


class TemplateExportRequest(_Request):
    type: Literal[ExportType.TEMPLATE] = ExportType.TEMPLATE
    name: str
    file: ProjectOrTemplateFile


class JSONExportRequest(_Request):
    """Dump arbitrary content as JSON under a custom extension."""
    type: Literal[ExportType.GENERIC_JSON] = ExportType.GENERIC_JSON
    content: Any = None
    extension: str
    name: Optional[str] = None


class UsageExportRequest(_Request):
    type: Literal[ExportType.USAGE] = ExportType.USAGE
    content: Any = None


class AllShowsExportRequest(_Request):
    """Export every show file found in a folder."""
    type: Literal[ExportType.ALL_SHOWS] = ExportType.ALL_SHOWS
    format: str
    shows_path: Path


ExportRequest = Annotated[
    Union[
        ShowExportRequest,
        TextExportRequest,
        PdfExportRequest,
        ProjectExportRequest,
        TemplateExportRequest,
        JSONExportRequest,
        UsageExportRequest,
        AllShowsExportRequest,
    ],
    Field(discriminator="type"),
]


class ExportData(BaseModel):
    """Payload of an inbound export message."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    path: Optional[str] = None
    content: Any = None
    shows: Optional[List[Show]] = None
    show_ids: Optional[List[str]] = Field(default=None, alias="showIds")
    shows_path: Optional[str] = Field(default=None, alias="showsPath")
    type: Optional[str] = None
    name: Optional[str] = None
    file: Optional[Dict[str, Any]] = None


class ExportMessage(BaseModel):
    """Inbound ``{channel, data}`` message from the controlling UI."""
    channel: str
    data: Optional[ExportData] = None

    def to_request(self, path: Path, shows: Optional[List[Show]] = None) -> ExportRequest:
        """
        Convert the tagged wire message into a typed request.

        Args:
            path: Resolved destination folder
            shows: Shows loaded by the caller, overriding ``data.shows``

        Raises:
            UnsupportedExportTypeError: Unknown channel or GENERATE sub-type
            ValidationError: Template or project file is malformed
        """
        data = self.data or ExportData()
        if shows is None:
            shows = data.shows or []

        if self.channel == ExportChannel.TEMPLATE:
            return TemplateExportRequest(
                path=path,
                name=data.name or (data.file or {}).get("name") or settings.UNNAMED_EXPORT_NAME,
                file=ProjectOrTemplateFile.model_validate(data.file or {}),
            )
        if self.channel == ExportChannel.THEME:
            return JSONExportRequest(
                path=path,
                content=data.content,
                extension=settings.THEME_EXTENSION,
            )
        if self.channel == ExportChannel.USAGE:
            return UsageExportRequest(path=path, content=data.content)
        if self.channel == ExportChannel.ALL_SHOWS:
            if not data.shows_path:
                raise UnsupportedExportTypeError(f"{self.channel} without showsPath")
            return AllShowsExportRequest(
                path=path,
                format=data.type or "",
                shows_path=Path(data.shows_path),
            )
        if self.channel != ExportChannel.GENERATE:
            raise UnsupportedExportTypeError(self.channel)

        if data.type == ExportType.PDF:
            payload = data.model_dump(mode="json", by_alias=True, exclude_unset=True)
            payload["path"] = str(path)
            if shows:
                payload["shows"] = [show.model_dump(mode="json", by_alias=True, exclude_unset=True) for show in shows]
            return PdfExportRequest(path=path, payload=payload)
        if data.type == ExportType.SHOW:
            return ShowExportRequest(path=path, shows=shows)
        if data.type == ExportType.TXT:
            return TextExportRequest(path=path, shows=shows)
        if data.type == ExportType.PROJECT:
            return ProjectExportRequest(
                path=path,
                name=data.name or settings.UNNAMED_EXPORT_NAME,
                file=ProjectOrTemplateFile.model_validate(data.file or {}),
            )

        raise UnsupportedExportTypeError(f"{self.channel}/{data.type}")


class HostChannel(str, Enum):
    """Channels between the coordinator and the hosted UI."""
    STARTUP = "STARTUP"
    EXPORT = "EXPORT"


class HostMessageKind(str, Enum):
    """Control message kinds exchanged with the rendering host."""
    TYPE = "TYPE"
    PDF = "PDF"
    EXPORT = "EXPORT"
    NEXT = "NEXT"
    DONE = "DONE"


class HostMessage(BaseModel):
    """Control message to or from the rendering host."""
    channel: str
    data: Any = None

    def data_field(self, key: str) -> Any:
        if isinstance(self.data, dict):
            return self.data.get(key)
        return None


class PDFOptions(BaseModel):
    """Page capture settings."""
    margins: Dict[str, float] = Field(
        default_factory=lambda: {"top": 0, "bottom": 0, "left": 0, "right": 0}
    )
    page_size: str = "A4"
    print_background: bool = True
    landscape: bool = False

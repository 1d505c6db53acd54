"""
Schemas for the show document model as handed to the export subsystem.

The models only declare the fields export reads; anything else a show file
carries is kept as extra data so native re-serialization is lossless.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from showexport.core.config import settings


class _DocumentModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class TextRun(_DocumentModel):
    """A run of text inside a line."""
    value: str = ""


class Line(_DocumentModel):
    """A line of an item, made of text runs."""
    text: Optional[List[TextRun]] = None


class Item(_DocumentModel):
    """A slide item (textbox or similar)."""
    lines: Optional[List[Line]] = None


class Slide(_DocumentModel):
    """Schema for a single slide."""
    group: Optional[str] = None
    children: Optional[List[str]] = None
    items: List[Item] = Field(default_factory=list)


class LayoutSlideRef(_DocumentModel):
    """Reference to a slide from a layout, in display order."""
    id: str
    children: Optional[Dict[str, Any] | List[Any]] = None


class Layout(_DocumentModel):
    """Named ordering of slides."""
    name: Optional[str] = None
    slides: List[LayoutSlideRef] = Field(default_factory=list)


class ShowSettings(_DocumentModel):
    """Show settings used by export."""
    active_layout: Optional[str] = Field(default=None, alias="activeLayout")


class Show(_DocumentModel):
    """A presentation document."""
    id: Optional[str] = None
    name: str = ""
    slides: Dict[str, Slide] = Field(default_factory=dict)
    layouts: Dict[str, Layout] = Field(default_factory=dict)
    settings: ShowSettings = Field(default_factory=ShowSettings)

    @property
    def display_name(self) -> str:
        """File name stem for exports: the show name, falling back to its id."""
        return self.name or self.id or settings.UNNAMED_EXPORT_NAME

    def active_layout(self) -> Optional[Layout]:
        layout_id = self.settings.active_layout
        if layout_id is None:
            return None
        return self.layouts.get(layout_id)

    def to_native(self) -> List[Any]:
        """
        Encode as the native ``[id, show]`` pair.

        The identifier is moved out of the object and stored positionally;
        the model itself is left untouched.
        """
        body = self.model_dump(by_alias=True, exclude={"id"}, exclude_unset=True)
        return [self.id, body]

    @classmethod
    def from_native(cls, payload: Any) -> "Show":
        """Decode a native ``[id, show]`` pair, re-attaching the identifier."""
        if not isinstance(payload, list) or len(payload) < 2 or not isinstance(payload[1], dict):
            raise ValueError("Expected a two-element [id, show] array")
        return cls.model_validate({**payload[1], "id": payload[0]})


class ProjectOrTemplateFile(BaseModel):
    """
    Manifest plus the asset paths to bundle next to it.

    ``files`` is not checked for existence up front; each path is tried when
    the archive is assembled.
    """
    model_config = ConfigDict(extra="allow")

    files: List[str] = Field(default_factory=list)

    def manifest(self, include_files: bool = True) -> Dict[str, Any]:
        """The JSON document written as ``data.json`` (or as the whole file)."""
        exclude = None if include_files else {"files"}
        return self.model_dump(exclude=exclude)

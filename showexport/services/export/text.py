"""
Plain text export: flattens a show's active layout into ordered text.

Traversal always follows the layout's slide list, so the output never
depends on the order of the slide mapping.
"""
import re
from typing import Iterator

from showexport.core.logging import get_logger
from showexport.domain.schemas.show import Show, Slide

logger = get_logger(__name__)

_BLANK_RUN = re.compile(r"\n{3,}")


def iter_flat_slides(show: Show) -> Iterator[Slide]:
    """
    Yield slides in display order: each layout slide, then its children.

    Layout references and child ids that do not resolve are skipped.
    """
    layout = show.active_layout()
    if layout is None:
        return

    for ref in layout.slides:
        slide = show.slides.get(ref.id)
        if slide is None:
            continue

        yield slide

        for child_id in slide.children or []:
            child = show.slides.get(child_id)
            if child is None:
                logger.warning("Skipping missing child slide", show_id=show.id, slide_id=ref.id, child_id=child_id)
                continue
            yield child


def render_slide_block(slide: Slide) -> str:
    """
    Text block for one slide.

    A ``[group]`` header, then one line per text line and a blank line after
    each item. A header with nothing under it gets a blank line of its own.
    """
    text = ""
    if slide.group:
        text += f"[{slide.group}]\n"

    for item in slide.items:
        for line in item.lines or []:
            if not line.text:
                continue
            text += "".join(run.value for run in line.text) + "\n"
        text += "\n"

    # no lines in this slide
    if text.endswith("]\n"):
        text += "\n"

    return text


def iter_text_blocks(show: Show) -> Iterator[str]:
    for slide in iter_flat_slides(show):
        yield render_slide_block(slide)


def collapse_blank_lines(text: str) -> str:
    """Collapse runs of three or more line breaks to two."""
    return _BLANK_RUN.sub("\n\n", text)


def flatten_show(show: Show) -> str:
    """Full plain text of a show; empty if its active layout is missing."""
    return collapse_blank_lines("".join(iter_text_blocks(show))).strip()

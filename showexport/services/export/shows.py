"""
Loading native show files from a shows folder.
"""
import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import aiofiles
from pydantic import ValidationError

from showexport.core.config import settings
from showexport.core.exceptions import UnparsableDocumentError
from showexport.core.logging import get_logger, log_error_details
from showexport.domain.schemas.show import Show
from showexport.services.export.paths import PathLike

logger = get_logger(__name__)


def list_show_files(shows_path: PathLike) -> List[Path]:
    """Show files in a folder, sorted by name. Missing folder yields nothing."""
    folder = Path(shows_path)
    if not folder.is_dir():
        return []
    return sorted(
        p for p in folder.iterdir()
        if p.is_file() and p.suffix == settings.SHOW_EXTENSION
    )


def parse_show(content: str, source: Optional[PathLike] = None) -> Show:
    """
    Decode native show file content.

    Raises:
        UnparsableDocumentError: Invalid JSON or not an ``[id, show]`` pair
    """
    try:
        return Show.from_native(json.loads(content))
    except (ValueError, ValidationError) as e:
        raise UnparsableDocumentError(source or "<show>", str(e)) from e


async def read_show(path: PathLike) -> Show:
    """
    Read and decode one show file.

    Raises:
        UnparsableDocumentError: File unreadable or not a show
    """
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            content = await f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise UnparsableDocumentError(path, str(e)) from e
    return parse_show(content, path)


async def load_shows(paths: Iterable[PathLike]) -> List[Show]:
    """Load shows, skipping any file that fails to read or parse."""
    shows: List[Show] = []
    for path in paths:
        try:
            shows.append(await read_show(path))
        except UnparsableDocumentError as e:
            logger.warning("Skipping unparsable show", **log_error_details(e, path=str(path)))
    return shows


async def load_show_collection(shows_path: PathLike) -> List[Show]:
    """Every loadable show in the folder."""
    files = list_show_files(shows_path)
    shows = await load_shows(files)
    logger.info("Loaded show collection", path=str(shows_path), found=len(files), loaded=len(shows))
    return shows


async def load_shows_by_id(show_ids: Iterable[str], shows_path: PathLike) -> List[Show]:
    """Shows with the given ids, in the order requested. Unknown ids are skipped."""
    by_id: Dict[str, Show] = {
        show.id: show for show in await load_show_collection(shows_path) if show.id is not None
    }

    shows: List[Show] = []
    for show_id in show_ids:
        show = by_id.get(show_id)
        if show is None:
            logger.warning("Show not found", show_id=show_id, path=str(shows_path))
            continue
        shows.append(show)
    return shows

"""
Archive bundles for project and template exports.

A bundle is a zip holding the manifest as ``data.json`` plus copies of the
asset files it references. Assets are read one by one when the bundle is
built; one that cannot be read is logged and left out.
"""
import io
import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Set
from zipfile import ZIP_DEFLATED, ZipFile

import aiofiles

from showexport.core.config import settings
from showexport.core.exceptions import MissingSourceFileError
from showexport.core.logging import get_logger, log_error_details
from showexport.services.export.paths import PathLike
from showexport.services.export.writer import FileWriter


class ArchiveBuilder:
    """Assembles manifest + assets into one file."""

    def __init__(self, writer: FileWriter, manifest_name: str = settings.ARCHIVE_MANIFEST_NAME):
        self.logger = get_logger(self.__class__.__name__)
        self.writer = writer
        self.manifest_name = manifest_name

    async def build(
        self,
        manifest: Dict[str, Any],
        file_paths: Iterable[PathLike],
        base_path: PathLike,
        extension: str,
        indent: Optional[int] = None,
    ) -> Path:
        """
        Write ``manifest`` and the files it references.

        With no files the manifest is written directly as JSON (same
        extension). Otherwise a zip is built in memory and written once.

        Args:
            manifest: Document stored as ``data.json`` (or as the whole file)
            file_paths: Assets to copy, stored under their base names
            base_path: Output path without extension
            extension: Output extension (``.project``, ``.fstemplate``)
            indent: JSON indentation for the plain manifest

        Returns:
            Path written

        Raises:
            ExportIOError: If the output could not be written
        """
        file_paths = list(file_paths)
        if not file_paths:
            return await self.writer.write(
                base_path,
                extension,
                json.dumps(manifest, indent=indent),
                "utf-8",
            )

        buffer = io.BytesIO()
        added: Set[str] = set()
        with ZipFile(buffer, "w", compression=ZIP_DEFLATED) as archive:
            for file_path in file_paths:
                await self._add_local_file(archive, Path(file_path), added)

            archive.writestr(self.manifest_name, json.dumps(manifest).encode("utf-8"))

        self.logger.info(
            "Archive assembled",
            files_requested=len(file_paths),
            files_added=len(added),
        )
        return await self.writer.write(base_path, extension, buffer.getvalue())

    async def _add_local_file(self, archive: ZipFile, file_path: Path, added: Set[str]) -> None:
        arcname = file_path.name
        if arcname in added or arcname == self.manifest_name:
            self.logger.warning("Skipping duplicate archive entry", path=str(file_path), arcname=arcname)
            return

        try:
            async with aiofiles.open(file_path, "rb") as f:
                payload = await f.read()
        except OSError as e:
            # file might not exist anymore
            error = MissingSourceFileError(file_path, e.strerror or str(e))
            self.logger.warning("Could not add a file to archive", **log_error_details(error, path=str(file_path)))
            return

        archive.writestr(arcname, payload)
        added.add(arcname)

"""
File writing for exports.

Every output goes through ``FileWriter``: the final name is allocated by the
path allocator and the file is created exclusively, so an existing file is
never merged into or replaced. Completion is reported on the session's alert
channel instead of being raised, since callers fire exports and move on.
"""
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import aiofiles

from showexport.core.config import settings
from showexport.core.exceptions import ExportIOError
from showexport.core.logging import get_logger, log_error_details
from showexport.core.messages import AlertKey, AlertMessages
from showexport.domain.interfaces.export_services import IAlertChannel, IFolderRevealer
from showexport.services.export.paths import PathLike, allocate_unique_path

logger = get_logger(__name__)

FileData = Union[str, bytes]
BatchItem = Tuple[PathLike, str, FileData]


class ExportSession:
    """
    Per-session export context.

    Holds the "output folder already revealed" flag: false when the session
    starts, set by the first successful write and never reset.
    """

    def __init__(
        self,
        alert_channel: IAlertChannel,
        folder_revealer: Optional[IFolderRevealer] = None,
        reveal_output: bool = settings.REVEAL_OUTPUT_FOLDER,
    ):
        self.logger = get_logger(self.__class__.__name__)
        self.alert_channel = alert_channel
        self.folder_revealer = folder_revealer
        self.reveal_output = reveal_output
        self.output_revealed = False

    async def alert(self, message: str) -> None:
        await self.alert_channel.alert(message)

    async def done_writing(
        self,
        error: Optional[BaseException],
        export_folder: PathLike,
        notify: bool = True,
    ) -> None:
        """
        Finish one write.

        Args:
            error: Write error, None on success
            export_folder: Folder the file went to
            notify: Whether to send the completion alert (last item of a batch)
        """
        message = AlertKey.EXPORTED.value

        if error is None and not self.output_revealed:
            self.output_revealed = True
            await self._reveal(Path(export_folder))
        elif error is not None:
            message = AlertMessages.from_error(error)

        if notify:
            await self.alert(message)

    async def _reveal(self, folder: Path) -> None:
        if not self.reveal_output or self.folder_revealer is None:
            return
        try:
            await self.folder_revealer.reveal(folder)
        except Exception as e:
            self.logger.warning("Could not reveal export folder", **log_error_details(e, folder=str(folder)))


class FileWriter:
    """Writes export artifacts to collision-free paths."""

    def __init__(self, session: ExportSession):
        self.logger = get_logger(self.__class__.__name__)
        self.session = session

    async def write(
        self,
        base_path: PathLike,
        extension: str,
        data: FileData,
        encoding: Optional[str] = None,
    ) -> Path:
        """
        Write ``data`` to a new file.

        Args:
            base_path: Desired path without extension
            extension: File extension including the dot
            data: Text or bytes
            encoding: Text encoding (utf-8 when omitted for text)

        Returns:
            Path actually written

        Raises:
            ExportIOError: If the storage refused the write
        """
        path = allocate_unique_path(base_path, extension)

        if isinstance(data, bytes):
            mode, encoding = "xb", None
        else:
            mode, encoding = "x", encoding or "utf-8"

        try:
            async with aiofiles.open(path, mode, encoding=encoding) as f:
                await f.write(data)
        except OSError as e:
            self.logger.error("Failed to write export file", **log_error_details(e, path=str(path)))
            raise ExportIOError(path, str(e)) from e

        self.logger.info("Export file written", path=str(path), size=len(data))
        return path

    async def write_and_notify(
        self,
        base_path: PathLike,
        extension: str,
        data: FileData,
        export_folder: PathLike,
        encoding: Optional[str] = None,
        notify: bool = True,
    ) -> Optional[Path]:
        """Write and report completion; errors go to the alert channel."""
        try:
            path = await self.write(base_path, extension, data, encoding)
        except ExportIOError as e:
            await self.session.done_writing(e, export_folder, notify)
            return None

        await self.session.done_writing(None, export_folder, notify)
        return path

    async def write_batch(
        self,
        items: Sequence[BatchItem],
        export_folder: PathLike,
        encoding: Optional[str] = None,
    ) -> List[Optional[Path]]:
        """
        Write several files in order.

        Only the last item's completion sends the alert; earlier failures are
        logged but not surfaced. A failed item does not stop the batch.

        Returns:
            Written path per item, None where the write failed
        """
        last = len(items) - 1
        results: List[Optional[Path]] = []

        for i, (base_path, extension, data) in enumerate(items):
            results.append(
                await self.write_and_notify(
                    base_path,
                    extension,
                    data,
                    export_folder,
                    encoding=encoding,
                    notify=i >= last,
                )
            )

        return results

"""
Desktop integrations: revealing folders and a log-backed alert channel.
"""
import asyncio
import sys
from pathlib import Path
from typing import List

from showexport.core.exceptions import ExportIOError
from showexport.core.logging import get_logger
from showexport.domain.interfaces.export_services import IAlertChannel, IFolderRevealer


def reveal_command(folder: Path, platform: str = sys.platform) -> List[str]:
    """System command that opens ``folder`` in the file browser."""
    if platform.startswith("win"):
        return ["explorer", str(folder)]
    if platform == "darwin":
        return ["open", str(folder)]
    return ["xdg-open", str(folder)]


class SystemFolderRevealer(IFolderRevealer):
    """Opens folders with the platform's file browser."""

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    async def reveal(self, folder: Path) -> None:
        command = reveal_command(folder)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            raise ExportIOError(folder, f"Could not open file browser: {e}") from e

        await process.wait()
        self.logger.debug("Revealed folder", folder=str(folder), returncode=process.returncode)


class LoggingAlertChannel(IAlertChannel):
    """Alert channel for headless runs: alerts are logged, and kept for inspection."""

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)
        self.messages: List[str] = []

    async def alert(self, message: str) -> None:
        self.messages.append(message)
        self.logger.info("Export alert", message=message)

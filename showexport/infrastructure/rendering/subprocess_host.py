"""
Rendering host running as a child process.

Wire format is one JSON object per line in both directions.

To the host::

    {"target": "STARTUP" | "EXPORT", "message": {"channel": ..., "data": ...}}
    {"target": "PRINT", "options": {...}}

From the host::

    {"channel": "LOADED"}                      once, after initial load
    {"channel": "EXPORT" | "DONE", "data": {...}}
    {"channel": "PDF_DATA", "data": "<base64>"}  reply to PRINT
"""
import asyncio
import base64
import binascii
import json
from typing import Any, Dict, Optional, Sequence

from pydantic import ValidationError

from showexport.core.config import settings
from showexport.core.exceptions import RenderingError
from showexport.core.logging import get_logger, log_error_details
from showexport.domain.interfaces.export_services import IRenderingHost
from showexport.domain.schemas.export import HostMessage

LOADED = "LOADED"
PRINT = "PRINT"
PDF_DATA = "PDF_DATA"


class SubprocessRenderingHost(IRenderingHost):
    """Drives a renderer process over stdin/stdout."""

    def __init__(
        self,
        command: Optional[Sequence[str]] = None,
        stream_limit: int = settings.RENDER_HOST_STREAM_LIMIT,
        close_timeout: float = settings.RENDER_HOST_CLOSE_TIMEOUT_SECONDS,
    ):
        self.logger = get_logger(self.__class__.__name__)
        self.command = list(command if command is not None else settings.RENDER_HOST_COMMAND)
        self.stream_limit = stream_limit
        self.close_timeout = close_timeout
        self._process: Optional[asyncio.subprocess.Process] = None

    async def launch(self, entry: str) -> None:
        if not self.command:
            raise RenderingError("No rendering host command configured")

        self._process = await asyncio.create_subprocess_exec(
            *self.command,
            entry,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            limit=self.stream_limit,
        )
        self.logger.info("Rendering host started", pid=self._process.pid, entry=entry)

        message = await self._read()
        if message is None or message.channel != LOADED:
            raise RenderingError(
                "Rendering host did not finish loading",
                channel=message.channel if message else None,
            )

    async def send(self, channel: str, message: HostMessage) -> None:
        await self._write({"target": channel, "message": message.model_dump(mode="json")})

    async def receive(self) -> Optional[HostMessage]:
        return await self._read()

    async def print_to_pdf(self, options: Dict[str, Any]) -> bytes:
        await self._write({"target": PRINT, "options": options})

        reply = await self._read()
        if reply is None or reply.channel != PDF_DATA or not isinstance(reply.data, str):
            raise RenderingError(
                "Rendering host returned no page data",
                channel=reply.channel if reply else None,
            )

        try:
            return base64.b64decode(reply.data, validate=True)
        except binascii.Error as e:
            raise RenderingError(f"Invalid page data from rendering host: {e}", channel=PDF_DATA) from e

    async def close(self) -> None:
        process, self._process = self._process, None
        if process is None or process.returncode is not None:
            return

        if process.stdin is not None:
            process.stdin.close()
        try:
            await asyncio.wait_for(process.wait(), timeout=self.close_timeout)
        except asyncio.TimeoutError:
            self.logger.warning("Rendering host did not exit, killing it", pid=process.pid)
            process.kill()
            await process.wait()

    async def _write(self, payload: Dict[str, Any]) -> None:
        if self._process is None or self._process.stdin is None:
            raise RenderingError("Rendering host is not running")

        line = json.dumps(payload).encode("utf-8") + b"\n"
        try:
            self._process.stdin.write(line)
            await self._process.stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as e:
            raise RenderingError(f"Rendering host connection lost: {e}") from e

    async def _read(self) -> Optional[HostMessage]:
        if self._process is None or self._process.stdout is None:
            return None

        while True:
            try:
                line = await self._process.stdout.readline()
            except ValueError as e:
                raise RenderingError(f"Rendering host message too large: {e}") from e
            if not line:
                return None
            if not line.strip():
                continue
            try:
                return HostMessage.model_validate_json(line)
            except ValidationError as e:
                self.logger.warning("Ignoring malformed host message", **log_error_details(e))

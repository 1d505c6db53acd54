"""
PDF export through an out-of-process rendering host.

The host runs the application's own UI in PDF mode. The UI renders one item
at a time and reports it with an ``EXPORT`` message; the coordinator captures
the page, writes it and answers ``NEXT``. ``DONE`` ends the run.

State machine::

    IDLE -> LAUNCHING -> LOADED -> RENDERING <-> WRITING -> IDLE
                                       any failure -> FAILED

Only one host instance exists at a time. A request arriving while an export
is running is rejected instead of replacing the host handle.
"""
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from showexport.core.config import settings
from showexport.core.exceptions import RenderingError, RenderingHostBusyError
from showexport.core.logging import get_logger, log_error_details
from showexport.core.messages import AlertMessages
from showexport.domain.interfaces.export_services import IRenderingHost
from showexport.domain.schemas.export import (
    ExportType,
    HostChannel,
    HostMessage,
    HostMessageKind,
    PDFOptions,
)
from showexport.services.export.writer import FileWriter

HostFactory = Callable[[], IRenderingHost]


class RenderState(str, Enum):
    """Rendering coordinator states."""
    IDLE = "idle"
    LAUNCHING = "launching"
    LOADED = "loaded"
    RENDERING = "rendering"
    WRITING = "writing"
    FAILED = "failed"


class RenderingCoordinator:
    """Owns the rendering host and drives one PDF export at a time."""

    def __init__(
        self,
        writer: FileWriter,
        host_factory: HostFactory,
        host_entry: Optional[str] = None,
        pdf_options: Optional[PDFOptions] = None,
    ):
        self.logger = get_logger(self.__class__.__name__)
        self.writer = writer
        self.session = writer.session
        self.host_factory = host_factory
        self.host_entry = host_entry or settings.render_host_entry
        self.pdf_options = pdf_options or PDFOptions(**settings.pdf_options())

        self._state = RenderState.IDLE
        self._host: Optional[IRenderingHost] = None

    @property
    def state(self) -> RenderState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state not in (RenderState.IDLE, RenderState.FAILED)

    @property
    def host(self) -> Optional[IRenderingHost]:
        return self._host

    async def export(self, payload: Dict[str, Any]) -> List[Path]:
        """
        Run a PDF export.

        Args:
            payload: Export data pushed to the hosted UI (shows, path, options)

        Returns:
            PDF files written before the run finished or failed

        Raises:
            RenderingHostBusyError: If another PDF export is in flight
        """
        if self.busy:
            raise RenderingHostBusyError()

        # claim the slot before the first suspension point
        self._transition(RenderState.LAUNCHING)
        written: List[Path] = []

        try:
            host = await self._launch_host()

            self._transition(RenderState.LOADED)
            await host.send(HostChannel.STARTUP.value, HostMessage(channel=HostMessageKind.TYPE.value, data=ExportType.PDF.value))
            await host.send(HostChannel.EXPORT.value, HostMessage(channel=HostMessageKind.PDF.value, data=payload))

            self._transition(RenderState.RENDERING)
            while True:
                message = await host.receive()
                if message is None:
                    raise RenderingError("Rendering host closed before the export finished")

                export_path = message.data_field("path")
                if not export_path:
                    continue

                if message.channel == HostMessageKind.DONE:
                    await self.session.done_writing(None, export_path)
                    self._transition(RenderState.IDLE)
                    return written

                if message.channel != HostMessageKind.EXPORT:
                    continue

                name = message.data_field("name")
                if not name:
                    continue

                await self.session.alert(name)
                if message.data_field("type") == ExportType.PDF.value:
                    written.append(await self._capture_page(host, Path(export_path) / name))

        except Exception as e:
            await self._fail(e)
            return written

    async def _launch_host(self) -> IRenderingHost:
        # a host left open by a finished export is replaced, not leaked
        await self._release_host()

        host = self.host_factory()
        self._host = host
        self.logger.info("Launching rendering host", entry=self.host_entry)
        await host.launch(self.host_entry)
        return host

    async def _capture_page(self, host: IRenderingHost, base_path: Path) -> Path:
        pdf = await host.print_to_pdf(self.pdf_options.model_dump())

        self._transition(RenderState.WRITING)
        path = await self.writer.write(base_path, settings.PDF_EXTENSION, pdf)

        await host.send(HostChannel.EXPORT.value, HostMessage(channel=HostMessageKind.NEXT.value))
        self._transition(RenderState.RENDERING)
        return path

    async def _fail(self, error: Exception) -> None:
        self.logger.error("PDF export failed", **log_error_details(error, state=self._state.value))
        self._transition(RenderState.FAILED)
        await self.session.alert(AlertMessages.from_error(error))
        await self._release_host()

    async def _release_host(self) -> None:
        host, self._host = self._host, None
        if host is None:
            return
        try:
            await host.close()
        except Exception as e:
            self.logger.warning("Rendering host did not close cleanly", **log_error_details(e))

    async def shutdown(self) -> None:
        """Close the host, if any, and return to idle."""
        await self._release_host()
        self._transition(RenderState.IDLE)

    def _transition(self, state: RenderState) -> None:
        self.logger.debug("Rendering state change", previous=self._state.value, state=state.value)
        self._state = state

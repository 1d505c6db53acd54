"""
Mock export collaborators for testing.

Stand-ins for the UI alert channel, file browser, folder picker and the
rendering host so export flows run without a desktop or a renderer.
"""
import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from showexport.domain.interfaces.export_services import (
    IAlertChannel,
    IFolderPicker,
    IFolderRevealer,
    IRenderingHost,
)
from showexport.domain.schemas.export import HostMessage


class MockAlertChannel(IAlertChannel):
    """Records alerts."""

    def __init__(self):
        self.messages: List[str] = []

    async def alert(self, message: str) -> None:
        self.messages.append(message)


class MockFolderRevealer(IFolderRevealer):
    """Records revealed folders."""

    def __init__(self, fail: bool = False):
        self.revealed: List[Path] = []
        self.fail = fail

    async def reveal(self, folder: Path) -> None:
        self.revealed.append(folder)
        if self.fail:
            raise OSError("no file browser")


class MockFolderPicker(IFolderPicker):
    """Returns a fixed selection and records persisted data paths."""

    def __init__(self, selection: Optional[Path]):
        self.selection = selection
        self.select_calls = 0
        self.persisted: List[Path] = []

    async def select_folder(self) -> Optional[Path]:
        self.select_calls += 1
        return self.selection

    async def persist_data_path(self, path: Path) -> None:
        self.persisted.append(path)


class MockRenderingHost(IRenderingHost):
    """
    Fake hosted UI.

    After the ``PDF`` payload arrives it reports one ``EXPORT`` per item name,
    each following ``NEXT``, and ``DONE`` when the items run out. Messages
    queued with ``push`` are delivered before anything the fake generates.
    """

    def __init__(
        self,
        items: Optional[List[str]] = None,
        pdf_bytes: bytes = b"%PDF-1.4 mock page",
        fail_launch: bool = False,
        fail_print_at: Optional[int] = None,
        disconnect: bool = False,
    ):
        self.items = list(items or [])
        self.pdf_bytes = pdf_bytes
        self.fail_launch = fail_launch
        self.fail_print_at = fail_print_at
        self.disconnect = disconnect

        self.launched_entry: Optional[str] = None
        self.sent: List[Tuple[str, HostMessage]] = []
        self.print_calls: List[Dict[str, Any]] = []
        self.close_calls = 0

        self._inbox: asyncio.Queue = asyncio.Queue()
        self._export_path: Optional[str] = None

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    def push(self, message: HostMessage) -> None:
        self._inbox.put_nowait(message)

    def sent_kinds(self) -> List[str]:
        return [message.channel for _, message in self.sent]

    async def launch(self, entry: str) -> None:
        if self.fail_launch:
            raise RuntimeError("renderer failed to load")
        self.launched_entry = entry

    async def send(self, channel: str, message: HostMessage) -> None:
        self.sent.append((channel, message))
        if message.channel == "PDF":
            self._export_path = message.data["path"]
            self._advance()
        elif message.channel == "NEXT":
            self._advance()

    def _advance(self) -> None:
        if self.items:
            name = self.items.pop(0)
            self.push(HostMessage(channel="EXPORT", data={"name": name, "path": self._export_path, "type": "pdf"}))
        else:
            self.push(HostMessage(channel="DONE", data={"path": self._export_path}))

    async def receive(self) -> Optional[HostMessage]:
        if self.disconnect or self.closed:
            return None
        return await self._inbox.get()

    async def print_to_pdf(self, options: Dict[str, Any]) -> bytes:
        self.print_calls.append(options)
        if self.fail_print_at is not None and len(self.print_calls) - 1 == self.fail_print_at:
            raise RuntimeError("capture failed")
        return self.pdf_bytes

    async def close(self) -> None:
        self.close_calls += 1


class BlockingRenderingHost(MockRenderingHost):
    """Host whose initial load only finishes once ``loaded`` is set."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.loaded = asyncio.Event()
        self.launch_started = asyncio.Event()

    async def launch(self, entry: str) -> None:
        self.launch_started.set()
        await self.loaded.wait()
        await super().launch(entry)

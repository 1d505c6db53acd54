"""
Interfaces for the collaborators the export subsystem drives but does not own.
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from showexport.domain.schemas.export import HostMessage


class IAlertChannel(ABC):
    """Out-of-band notification channel to the controlling UI."""

    @abstractmethod
    async def alert(self, message: str) -> None:
        """Send an alert (translation key or raw text)."""
        pass


class IFolderRevealer(ABC):
    """Opens a folder in the system file browser."""

    @abstractmethod
    async def reveal(self, folder: Path) -> None:
        """Reveal the folder."""
        pass


class IFolderPicker(ABC):
    """Interactive folder selection and default data folder persistence."""

    @abstractmethod
    async def select_folder(self) -> Optional[Path]:
        """Ask the user for a folder; None when cancelled."""
        pass

    @abstractmethod
    async def persist_data_path(self, path: Path) -> None:
        """Store the chosen folder as the new default data folder."""
        pass


class IRenderingHost(ABC):
    """Out-of-process renderer running the application's own UI."""

    @abstractmethod
    async def launch(self, entry: str) -> None:
        """Start the host on the UI entry point; returns once initial load finished."""
        pass

    @abstractmethod
    async def send(self, channel: str, message: HostMessage) -> None:
        """Push a control message into the hosted UI."""
        pass

    @abstractmethod
    async def receive(self) -> Optional[HostMessage]:
        """Wait for the next control message; None once the host is gone."""
        pass

    @abstractmethod
    async def print_to_pdf(self, options: Dict[str, Any]) -> bytes:
        """Capture the currently rendered page as a PDF document."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Tear the host down."""
        pass

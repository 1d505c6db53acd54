"""
Shared fixtures for export tests.
"""
import pytest

from showexport.services.export.writer import ExportSession, FileWriter
from tests.mocks.export_collaborators import MockAlertChannel, MockFolderRevealer


@pytest.fixture
def alert_channel() -> MockAlertChannel:
    return MockAlertChannel()


@pytest.fixture
def folder_revealer() -> MockFolderRevealer:
    return MockFolderRevealer()


@pytest.fixture
def session(alert_channel, folder_revealer) -> ExportSession:
    """Fresh session: output folder not revealed yet."""
    return ExportSession(alert_channel, folder_revealer, reveal_output=True)


@pytest.fixture
def writer(session) -> FileWriter:
    return FileWriter(session)

"""
Tests for PDF export through the rendering host.
"""
import asyncio

import pytest

from showexport.core.exceptions import RenderingHostBusyError
from showexport.domain.schemas.export import HostMessage
from showexport.services.export.rendering import RenderingCoordinator, RenderState
from tests.mocks.export_collaborators import BlockingRenderingHost, MockRenderingHost


def coordinator_for(writer, *hosts) -> RenderingCoordinator:
    queue = list(hosts)
    return RenderingCoordinator(writer, lambda: queue.pop(0), host_entry="public/index.html")


class TestRenderingCoordinator:
    """Rendering handshake and item loop."""

    @pytest.mark.asyncio
    async def test_exports_every_item(self, writer, alert_channel, tmp_path):
        host = MockRenderingHost(items=["Song A", "Song B"])
        coordinator = coordinator_for(writer, host)

        written = await coordinator.export({"path": str(tmp_path), "shows": []})

        assert written == [tmp_path / "Song A.pdf", tmp_path / "Song B.pdf"]
        assert (tmp_path / "Song A.pdf").read_bytes() == b"%PDF-1.4 mock page"
        assert alert_channel.messages == ["Song A", "Song B", "export.exported"]
        assert coordinator.state == RenderState.IDLE

    @pytest.mark.asyncio
    async def test_startup_handshake(self, writer, tmp_path):
        host = MockRenderingHost()
        payload = {"path": str(tmp_path), "type": "pdf"}

        await coordinator_for(writer, host).export(payload)

        assert host.launched_entry == "public/index.html"
        (startup_channel, startup), (export_channel, push) = host.sent[:2]
        assert (startup_channel, startup.channel, startup.data) == ("STARTUP", "TYPE", "pdf")
        assert (export_channel, push.channel, push.data) == ("EXPORT", "PDF", payload)

    @pytest.mark.asyncio
    async def test_next_sent_after_each_page(self, writer, tmp_path):
        host = MockRenderingHost(items=["a", "b", "c"])

        await coordinator_for(writer, host).export({"path": str(tmp_path)})

        assert host.sent_kinds() == ["TYPE", "PDF", "NEXT", "NEXT", "NEXT"]

    @pytest.mark.asyncio
    async def test_capture_uses_fixed_page_settings(self, writer, tmp_path):
        host = MockRenderingHost(items=["a"])

        await coordinator_for(writer, host).export({"path": str(tmp_path)})

        assert host.print_calls == [
            {
                "margins": {"top": 0, "bottom": 0, "left": 0, "right": 0},
                "page_size": "A4",
                "print_background": True,
                "landscape": False,
            }
        ]

    @pytest.mark.asyncio
    async def test_host_kept_open_after_done(self, writer, tmp_path):
        host = MockRenderingHost(items=["a"])
        coordinator = coordinator_for(writer, host)

        await coordinator.export({"path": str(tmp_path)})

        assert coordinator.host is host
        assert not host.closed

    @pytest.mark.asyncio
    async def test_same_name_pages_do_not_overwrite(self, writer, tmp_path):
        host = MockRenderingHost(items=["Song", "Song"])

        written = await coordinator_for(writer, host).export({"path": str(tmp_path)})

        assert written == [tmp_path / "Song.pdf", tmp_path / "Song_1.pdf"]

    @pytest.mark.asyncio
    async def test_messages_without_path_or_name_are_ignored(self, writer, alert_channel, tmp_path):
        host = MockRenderingHost()
        host.push(HostMessage(channel="EXPORT", data={"name": "no path", "type": "pdf"}))
        host.push(HostMessage(channel="DONE", data={}))
        host.push(HostMessage(channel="EXPORT", data={"path": str(tmp_path), "type": "pdf"}))
        host.push(HostMessage(channel="UNKNOWN", data={"path": str(tmp_path)}))

        written = await coordinator_for(writer, host).export({"path": str(tmp_path)})

        assert written == []
        assert host.print_calls == []
        assert alert_channel.messages == ["export.exported"]

    @pytest.mark.asyncio
    async def test_non_pdf_items_are_announced_but_not_captured(self, writer, alert_channel, tmp_path):
        host = MockRenderingHost()
        host.push(HostMessage(channel="EXPORT", data={"name": "Preview", "path": str(tmp_path), "type": "image"}))

        written = await coordinator_for(writer, host).export({"path": str(tmp_path)})

        assert written == []
        assert host.print_calls == []
        assert alert_channel.messages == ["Preview", "export.exported"]


class TestRenderingFailures:
    """Failure handling and host teardown."""

    @pytest.mark.asyncio
    async def test_capture_failure_tears_down_host(self, writer, alert_channel, tmp_path):
        host = MockRenderingHost(items=["a", "b", "c"], fail_print_at=1)
        coordinator = coordinator_for(writer, host)

        written = await coordinator.export({"path": str(tmp_path)})

        assert written == [tmp_path / "a.pdf"]
        assert alert_channel.messages == ["a", "b", "capture failed"]
        assert coordinator.state == RenderState.FAILED
        assert host.closed
        assert coordinator.host is None

    @pytest.mark.asyncio
    async def test_write_failure_tears_down_host(self, writer, alert_channel, tmp_path):
        host = MockRenderingHost(items=["a"])
        coordinator = coordinator_for(writer, host)

        written = await coordinator.export({"path": str(tmp_path / "missing")})

        assert written == []
        assert alert_channel.messages[0] == "a"
        assert "missing" in alert_channel.messages[-1]
        assert coordinator.state == RenderState.FAILED
        assert host.closed

    @pytest.mark.asyncio
    async def test_launch_failure(self, writer, alert_channel, tmp_path):
        host = MockRenderingHost(fail_launch=True)
        coordinator = coordinator_for(writer, host)

        await coordinator.export({"path": str(tmp_path)})

        assert alert_channel.messages == ["renderer failed to load"]
        assert coordinator.state == RenderState.FAILED
        assert host.closed

    @pytest.mark.asyncio
    async def test_host_disconnect_fails_export(self, writer, alert_channel, tmp_path):
        host = MockRenderingHost(disconnect=True)
        coordinator = coordinator_for(writer, host)

        await coordinator.export({"path": str(tmp_path)})

        assert alert_channel.messages == ["Rendering host closed before the export finished"]
        assert coordinator.state == RenderState.FAILED

    @pytest.mark.asyncio
    async def test_export_possible_after_failure(self, writer, tmp_path):
        coordinator = coordinator_for(
            writer,
            MockRenderingHost(fail_launch=True),
            MockRenderingHost(items=["a"]),
        )

        await coordinator.export({"path": str(tmp_path)})
        written = await coordinator.export({"path": str(tmp_path)})

        assert written == [tmp_path / "a.pdf"]
        assert coordinator.state == RenderState.IDLE


class TestRenderingHostOwnership:
    """Single host instance, single export at a time."""

    @pytest.mark.asyncio
    async def test_concurrent_export_is_rejected(self, writer, tmp_path):
        host = BlockingRenderingHost(items=["a"])
        coordinator = coordinator_for(writer, host)

        first = asyncio.create_task(coordinator.export({"path": str(tmp_path)}))
        await host.launch_started.wait()

        assert coordinator.busy
        with pytest.raises(RenderingHostBusyError):
            await coordinator.export({"path": str(tmp_path)})

        host.loaded.set()
        assert await first == [tmp_path / "a.pdf"]
        assert not coordinator.busy

    @pytest.mark.asyncio
    async def test_previous_host_closed_before_new_launch(self, writer, tmp_path):
        first_host = MockRenderingHost(items=["a"])
        second_host = MockRenderingHost(items=["b"])
        coordinator = coordinator_for(writer, first_host, second_host)

        await coordinator.export({"path": str(tmp_path)})
        await coordinator.export({"path": str(tmp_path)})

        assert first_host.close_calls == 1
        assert coordinator.host is second_host
        assert not second_host.closed

    @pytest.mark.asyncio
    async def test_shutdown_closes_host(self, writer, tmp_path):
        host = MockRenderingHost(items=["a"])
        coordinator = coordinator_for(writer, host)
        await coordinator.export({"path": str(tmp_path)})

        await coordinator.shutdown()

        assert host.closed
        assert coordinator.host is None
        assert coordinator.state == RenderState.IDLE

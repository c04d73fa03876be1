"""Session 测试"""

import asyncio

import pytest

from termpanel.adapters.base import NotifyLevel
from termpanel.panel import Advisory, PanelOptions, Session, SessionState
from termpanel.telemetry import metrics


@pytest.fixture
def session(host):
    return Session(host)


class TestSetup:
    @pytest.mark.asyncio
    async def test_without_overrides(self, host, session):
        result = await session.setup()

        assert result is session
        assert session.options == PanelOptions()
        assert host.notifications == [(Advisory.CONFIG_SKIPPED.message, NotifyLevel.WARN)]

    @pytest.mark.asyncio
    async def test_with_overrides(self, host, session):
        await session.setup({"border": "double", "dimensions": {"height": 0.5}})

        assert session.options.border == "double"
        assert session.options.dimensions.height == 0.5
        assert session.options.dimensions.width == 0.8
        assert session.panel.options is session.options
        assert host.notifications == []


class TestRun:
    @pytest.mark.asyncio
    async def test_run_opens_panel(self, host, session):
        result = await session.run("echo hi")

        assert result is session
        assert session.state is SessionState.RUNNING
        assert session.is_running
        assert session.job_id == 1
        assert await session.panel.is_visible()
        assert host.surface_of(session.panel.window) == session.panel.surface
        assert len(host.spawned) == 1

    @pytest.mark.asyncio
    async def test_surface_tagged(self, host, session):
        await session.setup({"tag": "SFTerm"})
        await session.run("echo hi")
        assert host.surfaces[session.panel.surface] == "SFTerm"

    @pytest.mark.asyncio
    async def test_command_is_echoed_first(self, host, session):
        await session.run("sf org list --json")

        command = host.spawned[0]["command"]
        assert command.startswith("printf ")
        assert command.endswith("; sf org list --json")
        assert "sf org list --json" in command.split(";")[0]

    @pytest.mark.asyncio
    async def test_env_forwarded(self, host, session):
        await session.setup({"clear_env": True, "env": {"SF_ORG": "dev"}})
        await session.run("env")

        spawned = host.spawned[0]
        assert spawned["env"] == {"SF_ORG": "dev"}
        assert spawned["clear_env"] is True

    @pytest.mark.asyncio
    async def test_focus_restored(self, host, session):
        await session.run("echo hi")

        assert host.focus_log[0] == session.panel.window
        assert host.current == "w0"
        assert host.cursors["w0"] == (12, 4)

    @pytest.mark.asyncio
    async def test_exit_returns_to_idle_and_scrolls(self, host, session):
        await session.run("echo hi")
        surface = session.panel.surface

        await host.process_exit()

        assert session.state is SessionState.IDLE
        assert not session.is_running
        assert await session.panel.is_visible()
        assert host.surface_of(session.panel.window) == surface
        assert host.at_end[session.panel.window] is True
        assert host.current == "w0"
        assert metrics.get_counter("session.exit") == 1

    @pytest.mark.asyncio
    async def test_exit_while_panel_closed_reopens(self, host, session):
        await session.run("make build")
        await session.close()

        await host.process_exit()

        assert await session.panel.is_visible()

    @pytest.mark.asyncio
    async def test_fast_exit_waits_for_launch(self, host, session):
        exits = []
        spawn = host.spawn

        async def spawn_and_exit(surface, command, **kwargs):
            await spawn(surface, command, **kwargs)
            exits.append(asyncio.create_task(host.process_exit()))
            await asyncio.sleep(0)

        host.spawn = spawn_and_exit

        await session.run("true")
        await asyncio.gather(*exits)

        # 启动时的焦点恢复先完成，然后才是退出后的关闭再打开
        assert host.focus_log == ["p1", "w1", "w0", "p2", "w1", "w0"]
        assert host.closed == ["p1"]
        assert session.state is SessionState.IDLE

    @pytest.mark.asyncio
    async def test_second_run_reuses_window(self, host, session):
        await session.run("echo one")
        window = session.panel.window
        first_surface = session.panel.surface
        await host.process_exit()
        window = session.panel.window

        await session.run("echo two")

        assert session.panel.window == window
        assert session.panel.surface != first_surface
        assert first_surface in host.discarded
        assert session.job_id == 2


class TestSingleFlight:
    @pytest.mark.asyncio
    async def test_busy(self, host, session):
        await session.run("sleep 5")

        result = await session.run("echo x")

        assert result is session
        assert session.state is SessionState.RUNNING
        assert len(host.spawned) == 1
        assert "sleep 5" in host.spawned[0]["command"]
        assert host.notifications == [(Advisory.BUSY.message, NotifyLevel.WARN)]
        assert metrics.get_counter("session.busy") == 1

    @pytest.mark.asyncio
    async def test_concurrent_runs(self, host, session):
        gate = asyncio.Event()
        create_surface = host.create_surface

        async def slow_create_surface():
            await gate.wait()
            return await create_surface()

        host.create_surface = slow_create_surface

        first = asyncio.create_task(session.run("sleep 5"))
        await asyncio.sleep(0)
        assert session.state is SessionState.STARTING

        await session.run("echo x")
        gate.set()
        await first

        assert len(host.spawned) == 1
        assert session.state is SessionState.RUNNING
        assert host.messages == [Advisory.BUSY.message]

    @pytest.mark.asyncio
    async def test_run_after_exit(self, host, session):
        await session.run("echo one")
        await host.process_exit()

        await session.run("echo two")

        assert len(host.spawned) == 2
        assert session.state is SessionState.RUNNING

    @pytest.mark.asyncio
    async def test_stale_exit_ignored(self, host, session):
        await session.run("echo one")
        await host.process_exit(0)
        await session.run("echo two")

        await host.process_exit(0)

        assert session.state is SessionState.RUNNING


class TestFailures:
    @pytest.mark.asyncio
    async def test_host_error_returns_to_idle(self, host, session):
        host.fail_create_surface = True

        result = await session.run("echo hi")

        assert result is session
        assert session.state is SessionState.IDLE
        assert host.spawned == []
        assert host.notifications[-1][1] is NotifyLevel.ERROR
        assert metrics.get_counter("host.error") == 1

        host.fail_create_surface = False
        await session.run("echo hi")
        assert session.state is SessionState.RUNNING

    @pytest.mark.asyncio
    async def test_open_without_output(self, host, session):
        result = await session.open()

        assert result is session
        assert host.windows == {}
        assert host.messages == [Advisory.NO_OUTPUT_YET.message]


class TestVisibility:
    @pytest.mark.asyncio
    async def test_close_twice(self, host, session):
        await session.close()
        await session.close()
        assert session.state is SessionState.IDLE
        assert host.notifications == []

    @pytest.mark.asyncio
    async def test_toggle_keeps_output(self, host, session):
        await session.run("echo hi")
        surface = session.panel.surface

        await session.toggle()
        assert not await session.panel.is_visible()
        assert session.state is SessionState.RUNNING

        await session.toggle()
        assert await session.panel.is_visible()
        assert host.surface_of(session.panel.window) == surface

    @pytest.mark.asyncio
    async def test_methods_chain(self, session):
        assert await session.open() is session
        assert await session.close() is session
        assert await session.toggle() is session

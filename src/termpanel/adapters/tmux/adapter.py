"""Tmux host implementing the PanelHost interface.

Mapping:
- surface: a pane parked in a detached holding session, with remain-on-exit
  so its output outlives both the process and the panel
- window: the same pane while it is joined into the user's current window
- close: break the pane back into the holding session
"""

import asyncio
import itertools
import logging
import shlex

from termpanel import config
from termpanel.adapters.base import (
    ExitCallback,
    HostError,
    NotifyLevel,
    PanelHost,
    WindowStyle,
)

from .client import TmuxClient

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    NotifyLevel.DEBUG: logging.DEBUG,
    NotifyLevel.INFO: logging.INFO,
    NotifyLevel.WARN: logging.WARNING,
    NotifyLevel.ERROR: logging.ERROR,
}


class TmuxHost(PanelHost):
    """Tmux host implementing PanelHost.

    Wraps TmuxClient to provide the panel primitives.
    """

    def __init__(
        self,
        socket_path: str | None = None,
        holding_session: str = config.HOLDING_SESSION,
        client: TmuxClient | None = None,
    ):
        """Initialize TmuxHost.

        Args:
            socket_path: Optional tmux socket path.
            holding_session: Session that keeps hidden surfaces alive.
            client: Pre-built client (tests)
        """
        self._client = client or TmuxClient(socket_path=socket_path)
        self._holding = holding_session
        self._spawn_ids = itertools.count(1)
        self._watchers: set[asyncio.Task] = set()

    @property
    def name(self) -> str:
        return "tmux"

    @property
    def client(self) -> TmuxClient:
        """Access underlying TmuxClient."""
        return self._client

    # === surfaces ===

    async def _ensure_holding_session(self) -> None:
        if await self._client.has_session(self._holding):
            return
        if not await self._client.new_session(self._holding, config.SURFACE_PLACEHOLDER):
            raise HostError(f"cannot create holding session {self._holding!r}")
        logger.info(f"Created holding session {self._holding}")

    async def create_surface(self) -> str:
        await self._ensure_holding_session()
        pane_id = await self._client.new_window(self._holding, "surface", config.SURFACE_PLACEHOLDER)
        if pane_id is None:
            raise HostError("cannot create output pane")
        await self._client.set_option(pane_id, "remain-on-exit", "on")
        return pane_id

    async def surface_valid(self, surface: str | None) -> bool:
        if not surface:
            return False
        return await self._client.display("#{pane_id}", target=surface) == surface

    async def set_surface_tag(self, surface: str, tag: str) -> None:
        if not await self._client.set_option(surface, config.SURFACE_TAG_OPTION, tag):
            raise HostError(f"cannot tag pane {surface}")

    async def discard_surface(self, surface: str) -> None:
        if not await self._client.kill_pane(surface):
            raise HostError(f"cannot kill pane {surface}")

    # === windows ===

    async def _session_of(self, pane_id: str) -> str | None:
        return await self._client.display("#{session_name}", target=pane_id)

    async def window_valid(self, window: str | None) -> bool:
        if not window:
            return False
        session = await self._session_of(window)
        return session is not None and session != self._holding

    async def open_window(self, surface: str, style: WindowStyle) -> str:
        target = await self.current_window()
        _, lines = await self.screen_size()
        # tmux panes tile, so the row only decides which side of the split we land on
        before = style.row < (lines - style.height) / 2

        if not await self._client.join_pane(surface, target, style.height, before=before):
            raise HostError(f"cannot show pane {surface} next to {target}")

        await self._client.resize_pane(surface, style.width, style.height)
        await self._client.set_option(surface, "pane-border-lines", style.border, scope="-w")
        if style.title:
            await self._client.set_option(surface, "pane-border-status", "top", scope="-w")
            await self._client.set_pane_title(surface, style.title)
        await self._client.set_pane_style(surface, style.highlight)
        if style.blend:
            logger.debug(f"blend={style.blend} ignored: tmux panes have no opacity")

        return surface

    async def set_window_surface(self, window: str, surface: str) -> str:
        title = await self._client.display("#{pane_title}", target=window)
        if not await self._client.swap_pane(surface, window):
            raise HostError(f"cannot swap {surface} into {window}")
        if title:
            await self._client.set_pane_title(surface, title)
        return surface

    async def close_window(self, window: str) -> None:
        if not await self._client.break_pane(window, self._holding):
            raise HostError(f"cannot hide pane {window}")

    async def scroll_to_end(self, window: str) -> None:
        # leaving copy mode puts the view back at the live bottom of the pane
        await self._client.copy_mode(window, "-q")

    # === focus and cursor ===

    async def current_window(self) -> str:
        pane_id = await self._client.get_active_pane()
        if pane_id is None:
            raise HostError("no active tmux pane (is tmux running?)")
        return pane_id

    async def alternate_window(self) -> str | None:
        for pane in await self._client.list_panes():
            if pane["last"]:
                return pane["pane_id"]
        return None

    async def get_cursor(self, window: str) -> tuple[int, int]:
        fields = await self._client.display_fields(
            ["#{pane_in_mode}", "#{cursor_y}", "#{cursor_x}", "#{copy_cursor_y}", "#{copy_cursor_x}"],
            target=window,
        )
        if fields is None:
            raise HostError(f"cannot read cursor of {window}")
        in_mode, y, x, copy_y, copy_x = fields
        try:
            if in_mode == "1":
                return int(copy_y), int(copy_x)
            return int(y), int(x)
        except ValueError as e:
            raise HostError(f"bad cursor for {window}: {fields!r}") from e

    async def set_cursor(self, window: str, position: tuple[int, int]) -> None:
        in_mode = await self._client.display("#{pane_in_mode}", target=window)
        if in_mode is None:
            raise HostError(f"cannot read mode of {window}")
        if in_mode != "1":
            # outside copy mode the cursor belongs to the program in the pane
            return

        line, col = position
        await self._client.send_copy_command(window, "top-line")
        if line > 0:
            await self._client.send_copy_command(window, "cursor-down", repeat=line)
        await self._client.send_copy_command(window, "start-of-line")
        if col > 0:
            await self._client.send_copy_command(window, "cursor-right", repeat=col)

    async def focus_window(self, window: str) -> None:
        if not await self._client.select_pane(window):
            raise HostError(f"cannot focus {window}")

    # === screen, processes, notifications ===

    async def screen_size(self) -> tuple[int, int]:
        fields = await self._client.display_fields(["#{window_width}", "#{window_height}"])
        if fields is None:
            raise HostError("cannot read window size")
        try:
            return int(fields[0]), int(fields[1])
        except ValueError as e:
            raise HostError(f"bad window size: {fields!r}") from e

    def build_command(
        self, command: str, channel: str, env: dict[str, str], clear_env: bool
    ) -> str:
        """Wrap command so tmux signals channel once it finishes.

        command runs in its own `sh -c`, so `exit`, `exec` or a trailing
        comment end only that shell. The wrapper traps INT, HUP and TERM:
        Ctrl-C in the pane stops the command but the signal is still sent.
        With clear_env the command runs under `env -i` with only env set;
        the wrapper keeps the pane's environment so it can reach the tmux
        server.
        """
        child = ["sh", "-c", command]
        if clear_env:
            child = ["env", "-i", *(f"{k}={v}" for k, v in env.items()), *child]

        signal = shlex.join(self._client.base_command() + ["wait-for", "-S", channel])
        script = f"trap : INT HUP TERM; {shlex.join(child)}; status=$?; {signal}; exit $status"
        return f"sh -c {shlex.quote(script)}"

    async def spawn(
        self,
        surface: str,
        command: str,
        *,
        env: dict[str, str],
        clear_env: bool,
        on_exit: ExitCallback,
    ) -> None:
        channel = f"{config.WAIT_CHANNEL_PREFIX}-{surface.lstrip('%')}-{next(self._spawn_ids)}"
        wrapped = self.build_command(command, channel, env, clear_env)

        # start waiting first; a signal sent before the waiter arrives is kept by tmux
        waiter = asyncio.create_task(self._client.wait_for(channel))
        respawn_env = None if clear_env else env

        if not await self._client.respawn_pane(surface, wrapped, env=respawn_env):
            logger.error(f"respawn-pane failed for {surface}")
            await self._release(waiter, channel)
            self._track(self._deliver_exit(None, on_exit))
            return

        logger.debug(f"Spawned on {surface}, channel={channel}")
        self._track(self._deliver_exit(waiter, on_exit))

    async def _release(self, waiter: asyncio.Task, channel: str) -> None:
        """Stop waiting on a channel nothing will signal."""
        if not await self._client.signal(channel):
            waiter.cancel()
        await asyncio.gather(waiter, return_exceptions=True)

    def _track(self, coro) -> None:
        task = asyncio.create_task(coro)
        self._watchers.add(task)
        task.add_done_callback(self._watchers.discard)

    async def _deliver_exit(self, waiter: asyncio.Task | None, on_exit: ExitCallback) -> None:
        if waiter is not None:
            if not await waiter:
                logger.warning("wait-for returned an error; treating the job as finished")
        try:
            await on_exit()
        except Exception as e:
            logger.error(f"exit handler failed: {e}")

    async def notify(self, message: str, level: NotifyLevel) -> None:
        logger.log(_LOG_LEVELS[level], message)
        # '#' starts a format in display-message
        await self._client.display_message(message.replace("#", "##"), config.NOTIFY_DURATION_MS)

    async def aclose(self) -> None:
        """Cancel pending exit watchers (daemon shutdown)."""
        for task in list(self._watchers):
            task.cancel()
        if self._watchers:
            await asyncio.gather(*self._watchers, return_exceptions=True)

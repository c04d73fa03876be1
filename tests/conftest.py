"""Pytest 配置"""

import pytest

from termpanel.adapters.base import HostError, NotifyLevel, PanelHost, WindowStyle
from termpanel.telemetry import metrics


class FakeHost(PanelHost):
    """内存宿主

    用户窗口固定为 "w0"（焦点）和 "w1"（上一个窗口）。面板窗口为 "p1", "p2"...，
    输出面为 "s1", "s2"...。process_exit() 模拟进程退出。
    """

    def __init__(self, screen: tuple[int, int] = (80, 24)):
        self.screen = screen
        self.user_windows = {"w0", "w1"}
        self.current = "w0"
        self.alternate: str | None = "w1"
        self.cursors: dict[str, tuple[int, int]] = {"w0": (12, 4), "w1": (1, 0)}

        self.surfaces: dict[str, str | None] = {}  # surface -> tag
        self.windows: dict[str, str] = {}  # window -> surface
        self.at_end: dict[str, bool] = {}
        self.styles: list[WindowStyle] = []
        self.discarded: list[str] = []
        self.closed: list[str] = []
        self.focus_log: list[str] = []
        self.spawned: list[dict] = []
        self.notifications: list[tuple[str, NotifyLevel]] = []

        self.fail_create_surface = False
        self.fail_close = False
        self._exit_callbacks: list = []
        self._surface_ids = 0
        self._window_ids = 0

    @property
    def name(self) -> str:
        return "fake"

    # === surfaces ===

    async def create_surface(self) -> str:
        if self.fail_create_surface:
            raise HostError("no server")
        self._surface_ids += 1
        surface = f"s{self._surface_ids}"
        self.surfaces[surface] = None
        return surface

    async def surface_valid(self, surface):
        return surface is not None and surface in self.surfaces

    async def set_surface_tag(self, surface, tag):
        if surface not in self.surfaces:
            raise HostError(f"no surface {surface}")
        self.surfaces[surface] = tag

    async def discard_surface(self, surface):
        del self.surfaces[surface]
        self.discarded.append(surface)

    # === windows ===

    async def open_window(self, surface, style):
        self._window_ids += 1
        window = f"p{self._window_ids}"
        self.windows[window] = surface
        self.at_end[window] = False
        self.styles.append(style)
        return window

    async def window_valid(self, window):
        return window is not None and (window in self.windows or window in self.user_windows)

    async def set_window_surface(self, window, surface):
        self.windows[window] = surface
        self.at_end[window] = False
        return window

    async def close_window(self, window):
        if self.fail_close:
            raise HostError("cannot close")
        del self.windows[window]
        self.closed.append(window)
        if self.current == window:
            self.current = "w0"

    async def scroll_to_end(self, window):
        self.at_end[window] = True

    # === focus ===

    async def current_window(self):
        return self.current

    async def alternate_window(self):
        return self.alternate

    async def get_cursor(self, window):
        return self.cursors.get(window, (0, 0))

    async def set_cursor(self, window, position):
        self.cursors[window] = position

    async def focus_window(self, window):
        if not await self.window_valid(window):
            raise HostError(f"no window {window}")
        self.current = window
        self.focus_log.append(window)

    # === misc ===

    async def screen_size(self):
        return self.screen

    async def spawn(self, surface, command, *, env, clear_env, on_exit):
        self.spawned.append(
            {"surface": surface, "command": command, "env": env, "clear_env": clear_env}
        )
        self._exit_callbacks.append(on_exit)

    async def notify(self, message, level):
        self.notifications.append((message, level))

    # === test helpers ===

    async def process_exit(self, index: int = -1) -> None:
        """模拟第 index 个进程退出"""
        await self._exit_callbacks[index]()

    def surface_of(self, window: str) -> str:
        return self.windows[window]

    @property
    def messages(self) -> list[str]:
        return [message for message, _ in self.notifications]


@pytest.fixture
def anyio_backend():
    """指定 anyio 只使用 asyncio backend"""
    return "asyncio"


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture(autouse=True)
def reset_metrics():
    """每次测试前重置指标"""
    metrics.reset()
    yield
    metrics.reset()

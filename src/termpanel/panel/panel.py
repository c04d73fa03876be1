"""Panel - 可见面板与输出面

职责：
- 持有至多一个窗口句柄和一个输出面句柄
- 打开/关闭/切换面板，焦点变化前后使用 FocusMemento
- 新输出面到来时复用或新建窗口

窗口可以关闭而输出面保留（内容不丢失）；输出面每次运行都会替换。
"""

from typing import TYPE_CHECKING

from ..adapters.base import WindowStyle
from ..telemetry import get_logger
from .advisory import Advisory, advise
from .geometry import compute
from .memento import FocusMemento
from .options import PanelOptions

if TYPE_CHECKING:
    from ..adapters.base import PanelHost

logger = get_logger(__name__)


class Panel:
    """面板

    Attributes:
        window: 当前窗口句柄（关闭后可能失效）
        surface: 当前输出面句柄
        options: 当前配置（由 Session.setup 替换）
    """

    def __init__(self, host: "PanelHost", options: PanelOptions | None = None):
        self._host = host
        self.options = options or PanelOptions()
        self.window: str | None = None
        self.surface: str | None = None

    # === 查询 ===

    async def is_visible(self) -> bool:
        return await self._host.window_valid(self.window)

    async def has_output(self) -> bool:
        return await self._host.surface_valid(self.surface)

    # === 窗口生命周期 ===

    async def create_and_open(self, surface: str) -> str:
        """打开绑定 surface 的新窗口，不改变焦点

        几何每次都按当前屏幕尺寸重新计算。
        """
        cfg = self.options
        cols, lines = await self._host.screen_size()
        dim = compute(cols, lines, cfg.dimensions)

        style = WindowStyle(
            width=dim.width,
            height=dim.height,
            col=dim.col,
            row=dim.row,
            border=cfg.border,
            title=cfg.title,
            highlight=cfg.highlight,
            blend=cfg.blend,
        )
        window = await self._host.open_window(surface, style)
        logger.debug(f"[Panel] opened {window} {dim}")
        return window

    async def attach(self, surface: str) -> str:
        """绑定新输出面：复用仍然有效的窗口，否则新建

        旧输出面被丢弃，不会复用。

        Returns:
            绑定后的窗口句柄
        """
        previous = self.surface

        if await self._host.window_valid(self.window):
            window = await self._host.set_window_surface(self.window, surface)
        else:
            window = await self.create_and_open(surface)

        self.window, self.surface = window, surface

        if previous and previous != surface and await self._host.surface_valid(previous):
            await self._host.discard_surface(previous)

        return window

    async def open(self) -> "Panel":
        if await self._host.window_valid(self.window):
            return self

        if not await self._host.surface_valid(self.surface):
            await advise(self._host, Advisory.NO_OUTPUT_YET)
            return self

        window = await self.create_and_open(self.surface)
        memento = await FocusMemento.capture(self._host)

        await self._host.focus_window(window)
        await self._host.scroll_to_end(window)
        await memento.restore()

        self.window = window
        return self

    async def close(self) -> "Panel":
        if not await self._host.window_valid(self.window):
            return self

        await self._host.close_window(self.window)
        return self

    async def toggle(self) -> "Panel":
        if await self._host.window_valid(self.window):
            return await self.close()
        return await self.open()

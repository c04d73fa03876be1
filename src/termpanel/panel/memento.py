"""FocusMemento - 焦点/光标的保存与恢复

restore() 是尽力而为：任何宿主失败都只记录 debug 日志，不会打断调用方。
每个 memento 只能恢复一次。
"""

from typing import TYPE_CHECKING

from ..adapters.base import HostError
from ..telemetry import get_logger

if TYPE_CHECKING:
    from ..adapters.base import PanelHost

logger = get_logger(__name__)


class FocusMemento:
    """一次焦点变化前捕获的用户上下文

    Attributes:
        window: 捕获时的焦点窗口
        alternate: 宿主的"上一个窗口"，可能为 None
        cursor: 焦点窗口内的光标 (line, column)
    """

    def __init__(
        self,
        host: "PanelHost",
        window: str | None,
        alternate: str | None,
        cursor: tuple[int, int] | None,
    ):
        self._host = host
        self.window = window
        self.alternate = alternate
        self.cursor = cursor

    @classmethod
    async def capture(cls, host: "PanelHost") -> "FocusMemento":
        """捕获当前焦点窗口、上一个窗口和光标位置"""
        window = await host.current_window()
        alternate = await host.alternate_window()
        cursor = await host.get_cursor(window)
        return cls(host, window, alternate, cursor)

    @property
    def consumed(self) -> bool:
        return self.window is None or self.cursor is None

    async def restore(self) -> None:
        """恢复焦点与光标，之后清空自身"""
        if self.consumed:
            return

        window, alternate, cursor = self.window, self.alternate, self.cursor
        self.window = self.alternate = self.cursor = None

        # 先切到上一个窗口，让宿主的"上一个窗口"记录保持原样
        if alternate:
            try:
                await self._host.focus_window(alternate)
            except HostError as e:
                logger.debug(f"[Memento] alternate {alternate} not restored: {e}")

        try:
            if await self._host.window_valid(window):
                await self._host.focus_window(window)
                await self._host.set_cursor(window, cursor)
        except HostError as e:
            logger.debug(f"[Memento] {window} not restored: {e}")

"""Panel Host 抽象接口

定义面板宿主的统一接口，Session/Panel 只通过这些原语操作宿主：
- 输出面（surface）：保存命令输出的缓冲区，关闭面板后仍然存在
- 窗口（window）：显示某个输出面的可见面板
- 焦点/光标：保存与恢复用户之前的编辑上下文
- 进程：在输出面上启动命令，退出时回调
- 通知：带级别的提示消息

设计原则：
1. 句柄不透明：surface/window 都是字符串，由宿主解释
2. 异步优先：所有 IO 操作都是 async
3. 失败抛 HostError，上层决定是否吞掉
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

ExitCallback = Callable[[], Awaitable[None]]


class HostError(Exception):
    """宿主原语执行失败"""


class NotifyLevel(Enum):
    """通知级别"""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


@dataclass(frozen=True)
class WindowStyle:
    """打开面板窗口时的几何与样式

    Attributes:
        width, height: 尺寸（字符单元）
        col, row: 左上角位置（字符单元）
        border: 边框样式
        title: 面板标题
        highlight: 宿主样式字符串
        blend: 透明度 0-100（宿主不支持时忽略）
    """

    width: int
    height: int
    col: int
    row: int
    border: str = "single"
    title: str = ""
    highlight: str = "default"
    blend: int = 0


class PanelHost(ABC):
    """面板宿主抽象接口

    tmux 等后端必须实现此接口。句柄失效时，查询类方法返回 False，
    操作类方法抛出 HostError。
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """宿主名称（如 "tmux"）"""

    # === 输出面 ===

    @abstractmethod
    async def create_surface(self) -> str:
        """创建新的输出面，返回句柄"""

    @abstractmethod
    async def surface_valid(self, surface: str | None) -> bool:
        """输出面是否仍然存在"""

    @abstractmethod
    async def set_surface_tag(self, surface: str, tag: str) -> None:
        """给输出面打上类型标记"""

    @abstractmethod
    async def discard_surface(self, surface: str) -> None:
        """丢弃输出面（连同其内容）"""

    # === 窗口 ===

    @abstractmethod
    async def open_window(self, surface: str, style: WindowStyle) -> str:
        """打开显示 surface 的窗口，不改变焦点，返回窗口句柄"""

    @abstractmethod
    async def window_valid(self, window: str | None) -> bool:
        """窗口是否仍然可见且可用"""

    @abstractmethod
    async def set_window_surface(self, window: str, surface: str) -> str:
        """把已有窗口重新绑定到 surface，返回绑定后的窗口句柄"""

    @abstractmethod
    async def close_window(self, window: str) -> None:
        """关闭窗口，输出面保持不变"""

    @abstractmethod
    async def scroll_to_end(self, window: str) -> None:
        """把窗口视图滚动到内容末尾"""

    # === 焦点与光标 ===

    @abstractmethod
    async def current_window(self) -> str:
        """当前焦点窗口"""

    @abstractmethod
    async def alternate_window(self) -> str | None:
        """宿主的"上一个窗口"，没有时返回 None"""

    @abstractmethod
    async def get_cursor(self, window: str) -> tuple[int, int]:
        """窗口内光标位置 (line, column)"""

    @abstractmethod
    async def set_cursor(self, window: str, position: tuple[int, int]) -> None:
        """恢复窗口内光标位置"""

    @abstractmethod
    async def focus_window(self, window: str) -> None:
        """切换焦点到窗口"""

    # === 屏幕、进程、通知 ===

    @abstractmethod
    async def screen_size(self) -> tuple[int, int]:
        """当前屏幕尺寸 (columns, lines)"""

    @abstractmethod
    async def spawn(
        self,
        surface: str,
        command: str,
        *,
        env: dict[str, str],
        clear_env: bool,
        on_exit: ExitCallback,
    ) -> None:
        """在 surface 上后台运行 shell 命令

        进程退出（任意退出码）或启动失败时调用 on_exit。
        on_exit 总是异步调度，不会在 spawn 返回前执行。
        """

    @abstractmethod
    async def notify(self, message: str, level: NotifyLevel) -> None:
        """向用户显示提示消息"""

    # 可选方法（有默认实现）

    async def aclose(self) -> None:
        """释放宿主持有的后台任务"""
        return None

"""Panel 模块 - 单任务输出面板

提供：
- Session: 会话编排（公开接口 setup/run/toggle/open/close）
- SessionState: 会话状态
- Panel: 窗口与输出面
- FocusMemento: 焦点/光标保存与恢复
- PanelOptions, Dimensions: 配置
- Dimension, compute: 几何计算
- Advisory: 非致命提示
"""

from .advisory import Advisory, advise
from .geometry import Dimension, compute
from .memento import FocusMemento
from .options import Dimensions, PanelOptions, deep_merge, merge_options
from .panel import Panel
from .session import Session, SessionState

__all__ = [
    # Session
    "Session",
    "SessionState",
    # Panel
    "Panel",
    "FocusMemento",
    # Options
    "PanelOptions",
    "Dimensions",
    "deep_merge",
    "merge_options",
    # Geometry
    "Dimension",
    "compute",
    # Advisory
    "Advisory",
    "advise",
]

"""Panel Hosts 模块

提供面板宿主接口和数据结构：
- PanelHost: 宿主抽象接口
- WindowStyle: 打开窗口的几何与样式
- NotifyLevel: 通知级别
- HostError: 宿主原语失败
- create_host: 宿主工厂函数
"""

from .base import ExitCallback, HostError, NotifyLevel, PanelHost, WindowStyle
from .factory import create_host, detect_host_type

__all__ = [
    # Interface
    "PanelHost",
    "ExitCallback",
    "WindowStyle",
    "NotifyLevel",
    "HostError",
    # Factory
    "create_host",
    "detect_host_type",
]

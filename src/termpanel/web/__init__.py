"""控制服务"""

from .server import ControlServer, RunRequest, SessionStatus

__all__ = ["ControlServer", "RunRequest", "SessionStatus"]

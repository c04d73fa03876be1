"""控制服务 - 让进程外的调用方使用同一个 Session

路由：
- POST /api/run      {command}
- POST /api/toggle
- POST /api/open
- POST /api/close
- GET  /api/status
"""

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from termpanel.adapters.base import HostError

if TYPE_CHECKING:
    from termpanel.panel import Session

logger = logging.getLogger(__name__)


class RunRequest(BaseModel):
    """运行请求体"""

    command: str = Field(min_length=1)  # 完整 shell 命令行


class SessionStatus(BaseModel):
    """会话状态响应"""

    state: str
    is_running: bool
    job_id: int
    visible: bool
    has_output: bool


class ControlServer:
    """控制服务

    Session 由调用方构造后注入，服务只转发调用。
    """

    def __init__(self, session: "Session"):
        self.app = FastAPI(title="TermPanel")
        self.session = session
        self._setup_routes()

    async def status(self) -> SessionStatus:
        """当前会话状态"""
        session = self.session
        return SessionStatus(
            state=session.state.value,
            is_running=session.is_running,
            job_id=session.job_id,
            visible=await session.panel.is_visible(),
            has_output=await session.panel.has_output(),
        )

    def _setup_routes(self):
        @self.app.post("/api/run", response_model=SessionStatus)
        async def run(request: RunRequest):
            logger.debug(f"[ControlServer] run: {request.command}")
            await self.session.run(request.command)
            return await self._status_or_503()

        @self.app.post("/api/toggle", response_model=SessionStatus)
        async def toggle():
            await self._call(self.session.toggle)
            return await self._status_or_503()

        @self.app.post("/api/open", response_model=SessionStatus)
        async def open_panel():
            await self._call(self.session.open)
            return await self._status_or_503()

        @self.app.post("/api/close", response_model=SessionStatus)
        async def close_panel():
            await self._call(self.session.close)
            return await self._status_or_503()

        @self.app.get("/api/status", response_model=SessionStatus)
        async def status():
            return await self._status_or_503()

    async def _call(self, action) -> None:
        try:
            await action()
        except HostError as e:
            logger.error(f"[ControlServer] {action.__name__} failed: {e}")
            raise HTTPException(status_code=503, detail=str(e)) from e

    async def _status_or_503(self) -> SessionStatus:
        try:
            return await self.status()
        except HostError as e:
            raise HTTPException(status_code=503, detail=str(e)) from e

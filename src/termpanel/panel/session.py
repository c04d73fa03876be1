"""Session - 单任务执行与面板编排

职责：
- 持有配置、Panel 和运行状态
- 单飞保证：任意时刻至多一个任务在运行
- 启动任务：新输出面 → 复用/新建窗口 → 保存焦点 → spawn → 恢复焦点
- 任务退出：回到 IDLE，关闭再打开面板（滚动到末尾）

状态流转：
    IDLE --run--> STARTING --spawn--> RUNNING --exit--> IDLE
    STARTING/RUNNING --run--> 不变（BUSY 提示，新命令丢弃）

STARTING 覆盖单飞检查与 spawn 之间的所有 await，保证检查和占位在同一轮调度内完成。
"""

import asyncio
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..adapters.base import HostError, NotifyLevel
from ..telemetry import get_logger, metrics, shorten_command
from .advisory import Advisory, advise
from .command import compose_command
from .memento import FocusMemento
from .options import PanelOptions, merge_options
from .panel import Panel

if TYPE_CHECKING:
    from ..adapters.base import PanelHost

logger = get_logger(__name__)


class SessionState(Enum):
    """Session 状态"""

    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"

    @property
    def is_running(self) -> bool:
        return self is not SessionState.IDLE


class Session:
    """面板会话

    每个进程显式构造一个实例，并注入给所有需要执行命令的调用方。
    所有公开方法都返回 self，便于链式调用；提示只通过宿主通知渠道显示。
    """

    def __init__(self, host: "PanelHost", options: PanelOptions | None = None):
        self._host = host
        self._options = options or PanelOptions()
        self._panel = Panel(host, self._options)
        self._state = SessionState.IDLE
        self._job_id = 0

    # === 属性 ===

    @property
    def host(self) -> "PanelHost":
        return self._host

    @property
    def options(self) -> PanelOptions:
        return self._options

    @property
    def panel(self) -> Panel:
        return self._panel

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def job_id(self) -> int:
        return self._job_id

    # === 公开接口 ===

    async def setup(self, overrides: Mapping[str, Any] | None = None) -> "Session":
        """合并调用方配置（可选）"""
        if overrides is None:
            await advise(self._host, Advisory.CONFIG_SKIPPED)
            return self

        self._options = merge_options(self._options, overrides)
        self._panel.options = self._options
        logger.info(f"[Session] options updated: {sorted(overrides)}")
        return self

    async def run(self, command: str) -> "Session":
        """在面板中运行 shell 命令

        command 是完整的命令行，参数转义由调用方负责。
        """
        if self._state is not SessionState.IDLE:
            metrics.inc("session.busy")
            logger.info(f"[Session] busy, dropped: {shorten_command(command)}")
            await advise(self._host, Advisory.BUSY)
            return self

        self._state = SessionState.STARTING
        try:
            surface = await self._host.create_surface()
            await self._host.set_surface_tag(surface, self._options.tag)
            await self._panel.attach(surface)
            await self._launch(command)
        except HostError as e:
            if self._state is SessionState.STARTING:
                self._state = SessionState.IDLE
            metrics.inc("host.error")
            logger.error(f"[Session] cannot run {shorten_command(command)}: {e}")
            await self._host.notify(f"TermPanel: {e}", NotifyLevel.ERROR)

        return self

    async def toggle(self) -> "Session":
        await self._panel.toggle()
        return self

    async def open(self) -> "Session":
        await self._panel.open()
        return self

    async def close(self) -> "Session":
        await self._panel.close()
        return self

    # === 内部流程 ===

    async def _launch(self, command: str) -> None:
        panel = self._panel
        memento = await FocusMemento.capture(self._host)
        launched = asyncio.Event()
        try:
            await self._host.focus_window(panel.window)

            self._job_id += 1
            job_id = self._job_id

            async def on_exit() -> None:
                # 快速退出的任务要等本次启动（含焦点恢复）结束
                await launched.wait()
                await self._on_exit(job_id)

            self._state = SessionState.RUNNING
            metrics.inc("session.run")
            logger.info(f"[Session] job {job_id} started: {shorten_command(command)}")

            try:
                await self._host.spawn(
                    panel.surface,
                    compose_command(command),
                    env=dict(self._options.env),
                    clear_env=self._options.clear_env,
                    on_exit=on_exit,
                )
            except HostError:
                self._state = SessionState.STARTING
                raise
            # spawn 可能重置标记，这里重新设置
            await self._host.set_surface_tag(panel.surface, self._options.tag)
        finally:
            try:
                await memento.restore()
            finally:
                launched.set()

    async def _on_exit(self, job_id: int) -> None:
        if job_id != self._job_id:
            logger.debug(f"[Session] stale exit for job {job_id} (current {self._job_id})")
            return

        self._state = SessionState.IDLE
        metrics.inc("session.exit")
        logger.info(f"[Session] job {job_id} finished")

        # 关闭再打开：把视图移到最新输出
        try:
            await self._panel.close()
            await self._panel.open()
        except HostError as e:
            metrics.inc("host.error")
            logger.error(f"[Session] cannot reopen panel after job {job_id}: {e}")

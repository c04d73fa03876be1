"""控制服务启动"""

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import uvicorn

from termpanel import config
from termpanel.adapters import create_host
from termpanel.panel import Session
from termpanel.telemetry import configure_logging
from termpanel.web.server import ControlServer

if TYPE_CHECKING:
    from termpanel.adapters import PanelHost

logger = logging.getLogger(__name__)


def load_overrides(path: str | Path | None) -> dict[str, Any] | None:
    """读取 JSON 配置文件，未指定时返回 None"""
    if path is None:
        return None
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object, got {type(data).__name__}")
    return data


async def build_session(host: "PanelHost", overrides: dict[str, Any] | None = None) -> Session:
    """构造进程内唯一的 Session

    没有配置文件时不调用 setup()（setup 是可选的）。
    """
    session = Session(host)
    if overrides is not None:
        await session.setup(overrides)
    return session


async def start_server(
    session: Session,
    host: str = config.SERVER_HOST,
    port: int = config.SERVER_PORT,
) -> None:
    """启动控制服务，直到进程退出"""
    server = ControlServer(session)

    uvicorn_config = uvicorn.Config(
        server.app, host=host, port=port, log_level=config.LOG_LEVEL.lower()
    )
    uvicorn_server = uvicorn.Server(uvicorn_config)

    logger.info(f"TermPanel control server starting at http://{host}:{port} ({session.host.name})")

    try:
        await uvicorn_server.serve()
    finally:
        await session.host.aclose()


async def serve(
    host_type: str = "auto",
    socket_path: str | None = None,
    config_path: str | Path | None = None,
    bind: str = config.SERVER_HOST,
    port: int = config.SERVER_PORT,
) -> None:
    """daemon 入口：构造宿主和 Session，然后启动控制服务"""
    configure_logging()
    panel_host = create_host(host_type, socket_path=socket_path)
    session = await build_session(panel_host, load_overrides(config_path))
    await start_server(session, host=bind, port=port)

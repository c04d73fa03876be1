"""控制服务客户端"""

import httpx

from termpanel import config


class ControlClient:
    """通过 HTTP 调用 daemon 中的 Session

    Raises:
        httpx.HTTPError: 连接失败或服务返回错误状态
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = config.CLIENT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self._base_url = base_url or f"http://{config.SERVER_HOST}:{config.SERVER_PORT}"
        self._timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def _request(self, method: str, path: str, payload: dict | None = None) -> dict:
        with httpx.Client(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport
        ) as client:
            response = client.request(method, path, json=payload)
            response.raise_for_status()
            return response.json()

    def run(self, command: str) -> dict:
        return self._request("POST", "/api/run", {"command": command})

    def toggle(self) -> dict:
        return self._request("POST", "/api/toggle")

    def open(self) -> dict:
        return self._request("POST", "/api/open")

    def close(self) -> dict:
        return self._request("POST", "/api/close")

    def status(self) -> dict:
        return self._request("GET", "/api/status")

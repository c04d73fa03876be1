"""Telemetry - 统一日志和指标入口

提供统一的日志工厂和指标 facade，便于观测性追踪。

日志格式: [Component] msg
指标示例: session.run, session.busy, session.exit, advisory{kind=busy}, host.error
"""

import logging

from . import config

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    """获取带模块前缀的 logger

    Args:
        name: 模块名（通常使用 __name__）

    Returns:
        配置好的 Logger 实例
    """
    return logging.getLogger(name)


def configure_logging(level: str | None = None) -> None:
    """配置根 logger（仅由 daemon 入口调用）"""
    logging.basicConfig(level=(level or config.LOG_LEVEL).upper(), format=_LOG_FORMAT)


def shorten_command(command: str, limit: int = config.LOG_MAX_CMD_LEN) -> str:
    """截断过长命令，用于日志输出"""
    if len(command) <= limit:
        return command
    return command[: limit - 3] + "..."


class Metrics:
    """指标收集 facade

    提供简单的计数器接口。当前实现为内存存储。
    """

    def __init__(self):
        self._counters: dict[str, int] = {}

    def inc(self, name: str, labels: dict[str, str] | None = None, value: int = 1) -> None:
        """递增计数器

        Args:
            name: 指标名（如 "session.busy"）
            labels: 可选标签（如 {"kind": "busy"}）
            value: 递增值，默认 1
        """
        key = self._make_key(name, labels)
        self._counters[key] = self._counters.get(key, 0) + value

    def get_counter(self, name: str, labels: dict[str, str] | None = None) -> int:
        """获取计数器值（用于测试）"""
        return self._counters.get(self._make_key(name, labels), 0)

    def reset(self) -> None:
        """重置所有指标（用于测试）"""
        self._counters.clear()

    def _make_key(self, name: str, labels: dict[str, str] | None) -> str:
        if not labels:
            return name
        label_str = ",".join(f"{k}={v}" for k, v in sorted(labels.items()))
        return f"{name}{{{label_str}}}"


# 全局指标实例
metrics = Metrics()

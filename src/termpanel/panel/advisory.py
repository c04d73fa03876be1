"""Advisory - 非致命的用户提示"""

from enum import Enum
from typing import TYPE_CHECKING

from ..adapters.base import NotifyLevel
from ..telemetry import get_logger, metrics

if TYPE_CHECKING:
    from ..adapters.base import PanelHost

logger = get_logger(__name__)


class Advisory(Enum):
    """提示类型

    - CONFIG_SKIPPED: setup() 无参数调用
    - BUSY: 运行中再次 run()，新命令被丢弃
    - NO_OUTPUT_YET: 从未运行过命令就 open()
    """

    CONFIG_SKIPPED = "config_skipped"
    BUSY = "busy"
    NO_OUTPUT_YET = "no_output_yet"

    @property
    def message(self) -> str:
        messages = {
            Advisory.CONFIG_SKIPPED: "TermPanel: setup() is optional. Please remove it!",
            Advisory.BUSY: "Wait the current task to finish.",
            Advisory.NO_OUTPUT_YET: "No running task to display.",
        }
        return messages[self]

    @property
    def level(self) -> NotifyLevel:
        return NotifyLevel.WARN


async def advise(host: "PanelHost", advisory: Advisory) -> None:
    """记录并通过宿主通知渠道显示提示"""
    logger.info(f"[Advisory] {advisory.value}")
    metrics.inc("advisory", {"kind": advisory.value})
    await host.notify(advisory.message, advisory.level)

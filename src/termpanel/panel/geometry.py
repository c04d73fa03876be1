"""面板几何计算"""

import math
from dataclasses import dataclass

from .options import Dimensions


@dataclass(frozen=True)
class Dimension:
    """面板绝对几何（字符单元）"""

    width: int
    height: int
    col: int
    row: int


def compute(screen_cols: int, screen_lines: int, dims: Dimensions) -> Dimension:
    """根据屏幕尺寸和比例计算面板几何

    不做任何裁剪，负数或越界结果原样交给宿主。

    Args:
        screen_cols: 屏幕列数
        screen_lines: 屏幕行数
        dims: 尺寸与位置比例

    Returns:
        Dimension
    """
    width = math.ceil(screen_cols * dims.width)
    height = math.ceil(screen_lines * dims.height - 4)

    col = math.ceil((screen_cols - width) * dims.x)
    row = math.ceil((screen_lines - height) * dims.y - 1)

    return Dimension(width=width, height=height, col=col, row=row)

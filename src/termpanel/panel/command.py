"""构造实际执行的 shell 命令：先回显命令本身（带颜色），再执行它。"""

import io
import shlex

from rich.console import Console
from rich.text import Text

from .. import config


def render_banner(command: str, style: str = config.BANNER_STYLE) -> str:
    """把命令文本渲染成带 ANSI 颜色的一行"""
    console = Console(
        file=io.StringIO(),
        record=True,
        force_terminal=True,
        color_system="standard",
        no_color=False,
        highlight=False,
    )
    console.print(Text(f" {command}", style=style), end="", soft_wrap=True)
    return console.export_text(styles=True)


def compose_command(command: str) -> str:
    """回显 + 原命令

    回显通过 printf 输出，命令文本经过 shell 转义，不会被再次展开。
    """
    return f"printf '%s\\n' {shlex.quote(render_banner(command))}; {command}"

"""面板配置

PanelOptions 在 setup() 时与调用方覆盖项深度合并，之后不可变。
只做 pydantic 类型转换，不做取值范围校验：越界的比例会在几何计算
或宿主调用时才暴露出来。
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Dimensions(BaseModel):
    """面板尺寸与位置，均为屏幕比例"""

    model_config = ConfigDict(frozen=True)

    height: float = 0.4
    width: float = 0.8
    x: float = 0.5
    y: float = 0.9


class PanelOptions(BaseModel):
    """面板显示与运行配置

    Attributes:
        tag: 输出面类型标记
        title: 面板标题
        border: 边框样式
        auto_close: 接受但当前不被任何流转读取
        highlight: 宿主样式字符串
        blend: 透明度 0-100
        clear_env: 以空环境运行命令（只保留 env）
        env: 额外环境变量
        dimensions: 尺寸与位置比例
    """

    model_config = ConfigDict(frozen=True)

    tag: str = "TermPanel"
    title: str = "TermPanel"
    border: str = "single"
    auto_close: bool = False
    highlight: str = "default"
    blend: int = 10
    clear_env: bool = False
    env: dict[str, str] = Field(default_factory=dict)
    dimensions: Dimensions = Field(default_factory=Dimensions)


def deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """递归合并，冲突时 overrides 优先

    两边都是 mapping 的键递归合并；其他值直接替换。两个输入都不会被修改。
    """
    merged: dict[str, Any] = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def merge_options(options: PanelOptions, overrides: Mapping[str, Any]) -> PanelOptions:
    """返回合并覆盖项后的新配置"""
    return PanelOptions.model_validate(deep_merge(options.model_dump(), overrides))

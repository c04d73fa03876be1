"""TermPanel 配置

配置分为以下几类：
- tmux 配置：holding session、用户选项名、wait-for 通道
- 通知配置：display-message 持续时间
- 服务配置：控制服务监听地址
- 日志配置
"""

import os

# === tmux 配置 ===
HOLDING_SESSION = "termpanel"  # 存放隐藏输出 pane 的 detached session
SURFACE_TAG_OPTION = "@termpanel_tag"  # pane 用户选项，记录输出类型标记
WAIT_CHANNEL_PREFIX = "termpanel-exit"  # wait-for 通道前缀
SURFACE_PLACEHOLDER = "tail -f /dev/null"  # 新建 pane 在 spawn 前运行的占位命令

# === 通知配置 ===
NOTIFY_DURATION_MS = 3000  # display-message 显示时长（毫秒）

# === 命令回显配置 ===
BANNER_STYLE = "magenta"  # 执行前回显命令的颜色

# === 服务配置 ===
SERVER_HOST = os.environ.get("TERMPANEL_HOST", "127.0.0.1")
SERVER_PORT = int(os.environ.get("TERMPANEL_PORT", "8766"))
CLIENT_TIMEOUT = 5.0  # CLI 请求超时（秒）

# === 日志配置 ===
LOG_LEVEL = os.environ.get("TERMPANEL_LOG_LEVEL", "INFO")  # 日志级别
LOG_MAX_CMD_LEN = 120  # 命令日志截断长度

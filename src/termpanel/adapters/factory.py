"""Host factory for creating panel hosts."""

import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from termpanel.adapters.base import PanelHost

logger = logging.getLogger(__name__)


def detect_host_type() -> str | None:
    """Detect host type from environment.

    Returns:
        "tmux" if $TMUX is set, otherwise None
    """
    if os.environ.get("TMUX"):
        return "tmux"
    return None


def create_host(host_type: str = "auto", socket_path: str | None = None) -> "PanelHost":
    """Create a panel host.

    Args:
        host_type: Host type ("tmux", "auto")
        socket_path: Tmux socket path (optional for tmux host)

    Returns:
        PanelHost instance

    Raises:
        ValueError: If host type is unknown or cannot be detected
    """
    if host_type == "auto":
        detected = detect_host_type()
        if detected is None and socket_path is None:
            raise ValueError("Cannot detect host: not inside tmux and no socket given")
        host_type = detected or "tmux"
        logger.info(f"Auto-detected host type: {host_type}")

    if host_type == "tmux":
        from termpanel.adapters.tmux import TmuxHost

        return TmuxHost(socket_path=socket_path)

    raise ValueError(f"Unknown host type: {host_type}")

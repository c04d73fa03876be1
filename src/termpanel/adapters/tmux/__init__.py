"""Tmux host for TermPanel."""

from .adapter import TmuxHost
from .client import TmuxClient

__all__ = ["TmuxHost", "TmuxClient"]

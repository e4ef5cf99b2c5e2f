"""JSON explorer: navigation controller and key handling."""

from .navigation import ExplorerView
from .panel import ExplorerAction, ExplorerPanel

__all__ = ["ExplorerAction", "ExplorerPanel", "ExplorerView"]

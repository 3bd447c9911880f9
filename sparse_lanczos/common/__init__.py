"""
Common utilities shared by the solvers: logging.

File    : sparse_lanczos/common/__init__.py
"""

from .flog import Logger, Colors, get_global_logger

__all__ = ["Logger", "Colors", "get_global_logger"]

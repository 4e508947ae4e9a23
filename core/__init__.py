"""Core helpers — logging and line counting.

This package is framework-agnostic. It must NEVER import from ``bot/`` or ``sdk/``.
"""

from core.lines import count_lines
from core.logger import CourierLogger

__all__ = [
    "count_lines",
    "CourierLogger",
]

"""
Utility modules for shapefit.
"""

from .display import StatusDisplay, LiveLogger
from .logger import SessionLogger
from .renderer import render_puzzle

__all__ = ['StatusDisplay', 'LiveLogger', 'SessionLogger', 'render_puzzle']

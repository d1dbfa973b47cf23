"""
Puzzle generation: random source, layout strategies and the generator.
"""

from .random_source import RandomSource
from .layouts import GridLayout, SilhouetteLayout, grid_positions, layout_center
from .generator import (
    PuzzleGenerator, generate_puzzle, tray_positions, assign_tray_positions
)

__all__ = [
    'RandomSource',
    'GridLayout', 'SilhouetteLayout', 'grid_positions', 'layout_center',
    'PuzzleGenerator', 'generate_puzzle', 'tray_positions', 'assign_tray_positions',
]

"""
shapefit: a shape-matching drag-and-drop puzzle core

Generates difficulty-tiered puzzles (grid layouts for easy mode, packed
silhouette templates for normal and hard), decides whether a dropped shape
snaps onto a target, and runs the stage progression of a game.

Rendering, input, audio and animation belong to the presentation layer; it
reads immutable state snapshots and subscribes to game events.

Example Usage:
```python
from shapefit import GameStateMachine

machine = GameStateMachine()
machine.start()
puzzle = machine.request_puzzle(1024, 768)
slot = puzzle.shapes[0]
target = puzzle.targets[0]
machine.drop(slot.shape.id, target.x, target.y)
```

Command-line Usage:
```bash
shapefit generate --difficulty normal --seed 7
shapefit play --auto --log-dir logs/
shapefit validate-config configs/default.yaml
```
"""

from shapefit.core.config import GameConfig, load_config, validate_config
from shapefit.game.snap import evaluate
from shapefit.game.state_machine import GameStateMachine
from shapefit.puzzle.generator import PuzzleGenerator, generate_puzzle

__version__ = "0.1.0"

__all__ = [
    "GameConfig",
    "load_config",
    "validate_config",
    "evaluate",
    "GameStateMachine",
    "PuzzleGenerator",
    "generate_puzzle",
]

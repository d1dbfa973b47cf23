"""
Game logic: snap matching, notifications, the progression state machine
and a text play session.
"""

from .events import EventBus, GameEvent
from .snap import evaluate, matches_target, find_snap_target
from .state_machine import GameStateMachine
from .session import PlaySession

__all__ = [
    'EventBus', 'GameEvent',
    'evaluate', 'matches_target', 'find_snap_target',
    'GameStateMachine', 'PlaySession',
]

"""
Game notifications.

The state machine publishes what happened (a shape snapped, a stage was
cleared, ...) and collaborators such as sound, effects or the session logger
subscribe. The core itself never plays audio or touches the screen.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, TYPE_CHECKING
if TYPE_CHECKING:
    from shapefit.core.base import GameState

PHASE_CHANGED = "phaseChanged"
DIFFICULTY_CHANGED = "difficultyChanged"
PUZZLE_READY = "puzzleReady"
SHAPE_PLACED = "shapePlaced"
SHAPE_SNAPPED = "shapeSnapped"
STAGE_CLEARED = "stageCleared"
GAME_CLEARED = "gameCleared"
GAME_RESET = "gameReset"
COMMAND_IGNORED = "commandIgnored"

ALL_EVENTS = "*"


@dataclass(frozen=True)
class GameEvent:
    """A notification together with the state right after it happened."""
    name: str
    state: "GameState"
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary (state summarised, puzzle omitted)."""
        return {
            "event": self.name,
            "phase": self.state.phase.value,
            "stage": self.state.current_stage,
            "difficulty": self.state.difficulty.value,
            "placed": len(self.state.placed_shape_ids),
            **self.payload,
        }


Handler = Callable[[GameEvent], None]


class EventBus:
    """Synchronous publish/subscribe keyed by event name."""

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, name: str, handler: Handler) -> Callable[[], None]:
        """
        Register ``handler`` for ``name`` (or ``"*"`` for every event).

        Returns:
            A callable that removes the subscription
        """
        self._handlers[name].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[name]:
                self._handlers[name].remove(handler)

        return unsubscribe

    def emit(self, event: GameEvent) -> None:
        """Deliver ``event`` to its subscribers, in subscription order."""
        for handler in list(self._handlers.get(event.name, ())):
            handler(event)
        for handler in list(self._handlers.get(ALL_EVENTS, ())):
            handler(event)

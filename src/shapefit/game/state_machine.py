"""
Game progression state machine.

Phases: menu -> playing -> stageClear -> (playing ... | gameClear).
Every command replaces the current ``GameState`` snapshot with a new one;
nothing mutates a snapshot in place. Stage completion is decided inside
``place`` itself, in the same transition that records the placement.
"""

from dataclasses import replace
from typing import Any, List, Optional, Tuple, Union

from shapefit.core.base import (
    Difficulty, DropAttempt, GamePhase, GameState, PuzzleTemplate, Rotation, SnapResult
)
from shapefit.core.config import GameConfig
from shapefit.game import events
from shapefit.game.events import EventBus, GameEvent, Handler
from shapefit.game.snap import find_snap_target
from shapefit.puzzle.generator import PuzzleGenerator


class GameStateMachine:
    """Owns the game state; the presentation layer only reads it and sends commands."""

    def __init__(self, config: Optional[GameConfig] = None,
                 generator: Optional[PuzzleGenerator] = None,
                 initial_state: Optional[GameState] = None):
        self.config = config if config is not None else GameConfig()
        self.generator = generator if generator is not None else PuzzleGenerator(self.config)
        self.events = EventBus()
        self._state = self._clamp(initial_state) if initial_state is not None else self.initial_state()

    # ------------------------------------------------------------------ #
    # Read access
    # ------------------------------------------------------------------ #
    @property
    def state(self) -> GameState:
        return self._state

    @property
    def total_stages(self) -> int:
        return self.config.total_stages

    def initial_state(self) -> GameState:
        """The state a fresh game (or a reset) starts from."""
        return GameState(difficulty=self.config.default_difficulty)

    def subscribe(self, name: str, handler: Handler):
        """Subscribe to an event name (``"*"`` for all). Returns an unsubscribe callable."""
        return self.events.subscribe(name, handler)

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #
    def set_difficulty(self, difficulty: Union[Difficulty, str]) -> GameState:
        """Change the difficulty. Allowed in any phase; nothing else changes."""
        difficulty = Difficulty(difficulty)
        if difficulty == self._state.difficulty:
            return self._state
        return self._commit(
            replace(self._state, difficulty=difficulty),
            [(events.DIFFICULTY_CHANGED, {"difficulty": difficulty.value})],
        )

    def start(self) -> GameState:
        """menu -> playing at stage 1 with no puzzle yet."""
        if self._state.phase != GamePhase.MENU:
            return self._ignore("start", "game already started")
        return self._commit(
            replace(
                self._state,
                phase=GamePhase.PLAYING,
                current_stage=1,
                puzzle=None,
                placed_shape_ids=frozenset(),
            ),
            [],
        )

    def puzzle_ready(self, puzzle: PuzzleTemplate) -> GameState:
        """Store the stage's puzzle. Only the first puzzle of a stage is accepted."""
        if self._state.phase != GamePhase.PLAYING:
            return self._ignore("puzzle_ready", f"phase is {self._state.phase.value}")
        if self._state.puzzle is not None:
            return self._ignore("puzzle_ready", "stage already has a puzzle")
        return self._commit(
            replace(self._state, puzzle=puzzle, placed_shape_ids=frozenset()),
            [(events.PUZZLE_READY, {"shape_count": len(puzzle.shapes)})],
        )

    def request_puzzle(self, viewport_width: Optional[float] = None,
                       viewport_height: Optional[float] = None) -> Optional[PuzzleTemplate]:
        """
        Generate the stage's puzzle if it is still missing.

        Calling this again in the same stage returns the existing puzzle
        without generating a new one.

        Returns:
            The current puzzle, or None outside the playing phase
        """
        if self._state.phase != GamePhase.PLAYING:
            return None
        if self._state.puzzle is None:
            puzzle = self.generator.generate(self._state.difficulty, viewport_width, viewport_height)
            self.puzzle_ready(puzzle)
        return self._state.puzzle

    def place(self, shape_id: str, target_id: Optional[str] = None) -> GameState:
        """
        Record a placed shape and, in the same transition, clear the stage
        once every shape is placed.

        Placing an already placed shape is a no-op.
        """
        state = self._state
        if state.phase != GamePhase.PLAYING or state.puzzle is None:
            return self._ignore("place", "no puzzle in play")
        if shape_id in state.placed_shape_ids:
            return state
        slot = state.puzzle.get_slot(shape_id)
        if slot is None:
            return self._ignore("place", f"unknown shape '{shape_id}'")
        if target_id is not None:
            target = state.puzzle.get_target(target_id)
            if target is None or target.placed_shape_id is not None:
                return self._ignore("place", f"target '{target_id}' is not open")

        shapes = tuple(
            replace(s, is_placed=True) if s.shape.id == shape_id else s
            for s in state.puzzle.shapes
        )
        targets = tuple(
            replace(t, placed_shape_id=shape_id) if t.id == target_id else t
            for t in state.puzzle.targets
        )
        placed = state.placed_shape_ids | {shape_id}
        new_state = replace(
            state,
            puzzle=PuzzleTemplate(shapes=shapes, targets=targets),
            placed_shape_ids=placed,
        )
        notices: List[Tuple[str, dict]] = [(events.SHAPE_PLACED, {
            "shape_id": shape_id,
            "target_id": target_id,
            "total": len(shapes),
        })]
        if new_state.is_stage_complete():
            new_state = replace(new_state, phase=GamePhase.STAGE_CLEAR)
            notices.append((events.STAGE_CLEARED, {"cleared_stage": state.current_stage}))
        return self._commit(new_state, notices)

    def drop(self, shape_id: str, x: float, y: float,
             rotation: Optional[Rotation] = None) -> Optional[SnapResult]:
        """
        Resolve a drop gesture and place the shape if it snaps.

        Args:
            rotation: Rotation of the dragged shape; defaults to the shape's own rotation

        Returns:
            The SnapResult for the snapped target (or the nearest open target
            when nothing snapped); None if the drop could not be evaluated.
        """
        state = self._state
        if state.phase != GamePhase.PLAYING or state.puzzle is None:
            self._ignore("drop", "no puzzle in play")
            return None
        slot = state.puzzle.get_slot(shape_id)
        if slot is None or slot.is_placed:
            self._ignore("drop", f"shape '{shape_id}' is not draggable")
            return None

        attempt = DropAttempt(
            x=x, y=y,
            shape_type=slot.shape.type,
            rotation=Rotation(rotation) if rotation is not None else slot.shape.rotation,
        )
        target, result = find_snap_target(attempt, state.puzzle.targets, self.config.snap_threshold)
        if target is not None:
            self._emit(events.SHAPE_SNAPPED, {
                "shape_id": shape_id,
                "target_id": target.id,
                "x": target.x,
                "y": target.y,
            })
            self.place(shape_id, target.id)
        return result

    def next(self) -> GameState:
        """stageClear -> next stage, or gameClear after the last one."""
        state = self._state
        if state.phase != GamePhase.STAGE_CLEAR:
            return self._ignore("next", f"phase is {state.phase.value}")
        if state.current_stage >= self.total_stages:
            return self._commit(
                replace(state, phase=GamePhase.GAME_CLEAR),
                [(events.GAME_CLEARED, {"stages": self.total_stages})],
            )
        return self._commit(
            replace(
                state,
                phase=GamePhase.PLAYING,
                current_stage=state.current_stage + 1,
                puzzle=None,
                placed_shape_ids=frozenset(),
            ),
            [],
        )

    def reset(self) -> GameState:
        """Back to the menu with every field at its initial value."""
        return self._commit(self.initial_state(), [(events.GAME_RESET, {})])

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    def _clamp(self, state: GameState) -> GameState:
        stage = min(max(int(state.current_stage), 1), self.total_stages)
        if stage == state.current_stage:
            return state
        return replace(state, current_stage=stage)

    def _commit(self, new_state: GameState, notices: List[Tuple[str, dict]]) -> GameState:
        old_phase = self._state.phase
        self._state = new_state
        if new_state.phase != old_phase:
            self._emit(events.PHASE_CHANGED, {"from": old_phase.value, "to": new_state.phase.value})
        for name, payload in notices:
            self._emit(name, payload)
        return new_state

    def _emit(self, name: str, payload: Any) -> None:
        self.events.emit(GameEvent(name=name, state=self._state, payload=payload))

    def _ignore(self, command: str, reason: str) -> GameState:
        self._emit(events.COMMAND_IGNORED, {"command": command, "reason": reason})
        return self._state

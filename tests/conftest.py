"""Shared fixtures.

- environment overrides cleared for the whole session
- a fixed-seed configuration and state machine
- a small hand-built puzzle with known coordinates
"""

from __future__ import annotations

import pytest

from shapefit.core.base import (
    DraggableShapeSlot, PuzzleTemplate, Rotation, Shape, ShapeType, TargetSlot
)
from shapefit.core.config import GameConfig
from shapefit.game.state_machine import GameStateMachine


@pytest.fixture(scope="session", autouse=True)
def clean_env():
    """Keep SHAPEFIT_* variables from the host out of the tests."""
    with pytest.MonkeyPatch.context() as mp:
        mp.delenv("SHAPEFIT_SEED", raising=False)
        mp.delenv("SHAPEFIT_SNAP_THRESHOLD", raising=False)
        yield


@pytest.fixture()
def config() -> GameConfig:
    return GameConfig(seed=1234)


@pytest.fixture()
def machine(config: GameConfig) -> GameStateMachine:
    return GameStateMachine(config)


def make_small_puzzle() -> PuzzleTemplate:
    square = Shape("sq1", ShapeType.SQUARE, 100, 100, Rotation.DEG_0, "#FF0000")
    rect = Shape("re1", ShapeType.RECTANGLE, 140, 70, Rotation.DEG_0, "#00FF00")
    return PuzzleTemplate(
        shapes=(
            DraggableShapeSlot(square, initial_x=200, initial_y=600),
            DraggableShapeSlot(rect, initial_x=450, initial_y=600),
        ),
        targets=(
            TargetSlot("target-sq1", ShapeType.SQUARE, 300, 200, 100, 100),
            TargetSlot("target-re1", ShapeType.RECTANGLE, 600, 200, 140, 70),
        ),
    )


@pytest.fixture()
def small_puzzle() -> PuzzleTemplate:
    return make_small_puzzle()


@pytest.fixture()
def playing(machine: GameStateMachine, small_puzzle: PuzzleTemplate) -> GameStateMachine:
    """A machine in the playing phase holding ``small_puzzle``."""
    machine.start()
    machine.puzzle_ready(small_puzzle)
    return machine


class EventRecorder:
    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)

    @property
    def names(self):
        return [e.name for e in self.events]


@pytest.fixture()
def recorder(machine: GameStateMachine) -> EventRecorder:
    rec = EventRecorder()
    machine.subscribe("*", rec)
    return rec

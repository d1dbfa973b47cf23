from __future__ import annotations

from dataclasses import replace

import pytest

from shapefit.core.base import Difficulty, FailureReason, GamePhase, GameState, Rotation
from shapefit.core.config import GameConfig
from shapefit.game import events
from shapefit.game.state_machine import GameStateMachine
from shapefit.puzzle.generator import PuzzleGenerator

from conftest import EventRecorder, make_small_puzzle


def cleared_state(stage: int) -> GameState:
    puzzle = make_small_puzzle()
    return GameState(
        difficulty=Difficulty.NORMAL,
        current_stage=stage,
        phase=GamePhase.STAGE_CLEAR,
        puzzle=puzzle,
        placed_shape_ids=frozenset(s.shape.id for s in puzzle.shapes),
    )


class CountingGenerator(PuzzleGenerator):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = 0

    def generate(self, *args, **kwargs):
        self.calls += 1
        return super().generate(*args, **kwargs)


class TestInitialState:
    def test_defaults(self, machine):
        state = machine.state
        assert state.phase == GamePhase.MENU
        assert state.current_stage == 1
        assert state.difficulty == Difficulty.EASY
        assert state.puzzle is None
        assert state.placed_shape_ids == frozenset()

    def test_default_difficulty_from_config(self):
        machine = GameStateMachine(GameConfig(default_difficulty="hard"))
        assert machine.state.difficulty == Difficulty.HARD

    @pytest.mark.parametrize("stage,expected", [(0, 1), (-3, 1), (9, 5), (3, 3)])
    def test_external_stage_is_clamped(self, stage, expected):
        machine = GameStateMachine(initial_state=GameState(current_stage=stage))
        assert machine.state.current_stage == expected


class TestStart:
    def test_menu_to_playing(self, machine, recorder):
        state = machine.start()
        assert state.phase == GamePhase.PLAYING
        assert state.current_stage == 1
        assert state.puzzle is None
        assert recorder.names == [events.PHASE_CHANGED]
        assert recorder.events[0].payload == {"from": "menu", "to": "playing"}

    def test_start_outside_menu_is_ignored(self, machine, recorder):
        machine.start()
        before = machine.state
        assert machine.start() is before
        assert recorder.names[-1] == events.COMMAND_IGNORED
        assert recorder.events[-1].payload["command"] == "start"


class TestPuzzle:
    def test_request_generates_once_per_stage(self, config):
        generator = CountingGenerator(config)
        machine = GameStateMachine(config, generator)
        machine.start()
        first = machine.request_puzzle(1024, 768)
        second = machine.request_puzzle(1024, 768)
        assert first is second
        assert generator.calls == 1
        assert len(first.shapes) == 3

    def test_request_outside_playing(self, machine):
        assert machine.request_puzzle(1024, 768) is None
        assert machine.state.puzzle is None

    def test_puzzle_ready_emits(self, machine, recorder, small_puzzle):
        machine.start()
        machine.puzzle_ready(small_puzzle)
        assert machine.state.puzzle == small_puzzle
        assert recorder.names[-1] == events.PUZZLE_READY
        assert recorder.events[-1].payload == {"shape_count": 2}

    def test_second_puzzle_is_ignored(self, playing, small_puzzle):
        other = replace(small_puzzle, shapes=small_puzzle.shapes[:1])
        playing.puzzle_ready(other)
        assert playing.state.puzzle == small_puzzle

    def test_puzzle_ready_in_menu_is_ignored(self, machine, small_puzzle):
        machine.puzzle_ready(small_puzzle)
        assert machine.state.puzzle is None


class TestPlace:
    def test_partial_placement(self, playing):
        state = playing.place("sq1")
        assert state.placed_shape_ids == frozenset({"sq1"})
        assert state.phase == GamePhase.PLAYING
        assert state.puzzle.get_slot("sq1").is_placed is True

    def test_last_placement_clears_stage(self, playing, recorder):
        playing.place("sq1")
        state = playing.place("re1")
        assert state.phase == GamePhase.STAGE_CLEAR
        assert recorder.names.count(events.STAGE_CLEARED) == 1
        cleared = next(e for e in recorder.events if e.name == events.STAGE_CLEARED)
        assert cleared.payload["cleared_stage"] == 1

    def test_place_is_idempotent(self, playing, recorder):
        first = playing.place("sq1")
        seen = len(recorder.events)
        assert playing.place("sq1") is first
        assert len(recorder.events) == seen

    def test_no_second_stage_clear(self, playing, recorder):
        playing.place("sq1")
        playing.place("re1")
        playing.place("re1")
        playing.place("sq1")
        assert recorder.names.count(events.STAGE_CLEARED) == 1
        assert playing.state.phase == GamePhase.STAGE_CLEAR

    def test_unknown_shape_is_ignored(self, playing, recorder):
        before = playing.state
        assert playing.place("nope") is before
        assert recorder.names[-1] == events.COMMAND_IGNORED

    def test_place_records_target(self, playing):
        state = playing.place("sq1", "target-sq1")
        assert state.puzzle.get_target("target-sq1").placed_shape_id == "sq1"

    def test_filled_target_is_rejected(self, playing):
        playing.place("sq1", "target-sq1")
        playing.place("re1", "target-sq1")
        assert "re1" not in playing.state.placed_shape_ids

    def test_old_snapshots_are_untouched(self, playing):
        before = playing.state
        playing.place("sq1")
        assert before.placed_shape_ids == frozenset()
        assert before.puzzle.get_slot("sq1").is_placed is False

    def test_place_in_menu_is_ignored(self, machine, recorder):
        machine.place("sq1")
        assert machine.state.phase == GamePhase.MENU
        assert recorder.names == [events.COMMAND_IGNORED]


class TestNext:
    def test_last_stage_goes_to_game_clear(self, recorder):
        machine = GameStateMachine(initial_state=cleared_state(5))
        machine.subscribe("*", recorder)
        state = machine.next()
        assert state.phase == GamePhase.GAME_CLEAR
        assert recorder.names == [events.PHASE_CHANGED, events.GAME_CLEARED]

    def test_middle_stage_advances(self):
        machine = GameStateMachine(initial_state=cleared_state(2))
        state = machine.next()
        assert state.phase == GamePhase.PLAYING
        assert state.current_stage == 3
        assert state.puzzle is None
        assert state.placed_shape_ids == frozenset()
        assert state.difficulty == Difficulty.NORMAL

    def test_next_while_playing_is_ignored(self, playing):
        before = playing.state
        assert playing.next() is before

    def test_custom_stage_count(self):
        machine = GameStateMachine(GameConfig(total_stages=2), initial_state=cleared_state(2))
        assert machine.next().phase == GamePhase.GAME_CLEAR


class TestResetAndDifficulty:
    def test_reset_restores_initial_state(self, playing, recorder):
        playing.set_difficulty("hard")
        playing.place("sq1")
        state = playing.reset()
        assert state == playing.initial_state()
        assert state.difficulty == Difficulty.EASY
        assert recorder.names[-1] == events.GAME_RESET

    def test_reset_from_game_clear(self):
        machine = GameStateMachine(initial_state=replace(cleared_state(5), phase=GamePhase.GAME_CLEAR))
        assert machine.reset().phase == GamePhase.MENU

    def test_difficulty_changes_in_any_phase(self, playing, recorder):
        state = playing.set_difficulty(Difficulty.HARD)
        assert state.difficulty == Difficulty.HARD
        assert state.phase == GamePhase.PLAYING
        assert state.puzzle is not None
        assert recorder.names == [events.DIFFICULTY_CHANGED]

    def test_same_difficulty_emits_nothing(self, machine, recorder):
        machine.set_difficulty("easy")
        assert recorder.events == []


class TestDrop:
    def test_snapping_drop_places_shape(self, playing, recorder):
        result = playing.drop("sq1", 320, 210)
        assert result.should_snap
        assert "sq1" in playing.state.placed_shape_ids
        assert recorder.names[:2] == [events.SHAPE_SNAPPED, events.SHAPE_PLACED]
        assert recorder.events[1].payload["target_id"] == "target-sq1"

    def test_missed_drop_places_nothing(self, playing):
        result = playing.drop("sq1", 400, 200)
        assert result.failure_reason == FailureReason.DISTANCE_EXCEEDED
        assert result.relative_offset == (100, 0)
        assert playing.state.placed_shape_ids == frozenset()

    def test_wrong_type_on_target(self, playing):
        result = playing.drop("sq1", 600, 200)
        assert result.failure_reason == FailureReason.TYPE_MISMATCH

    def test_drop_completes_stage(self, playing):
        playing.drop("sq1", 300, 200)
        playing.drop("re1", 600, 200)
        assert playing.state.phase == GamePhase.STAGE_CLEAR

    def test_drop_without_puzzle(self, machine):
        assert machine.drop("sq1", 300, 200) is None

    def test_drop_placed_shape(self, playing):
        playing.drop("sq1", 300, 200)
        assert playing.drop("sq1", 300, 200) is None

    def test_drop_uses_shape_rotation_by_default(self, machine, small_puzzle):
        square_target = replace(small_puzzle.targets[0], required_rotation=Rotation.DEG_0)
        machine.start()
        machine.puzzle_ready(replace(small_puzzle, targets=(square_target, small_puzzle.targets[1])))
        result = machine.drop("sq1", 300, 200)
        assert result.should_snap
        assert "sq1" in machine.state.placed_shape_ids

    def test_explicit_rotation_still_checked(self, machine, small_puzzle):
        square_target = replace(small_puzzle.targets[0], required_rotation=Rotation.DEG_0)
        machine.start()
        machine.puzzle_ready(replace(small_puzzle, targets=(square_target, small_puzzle.targets[1])))
        result = machine.drop("sq1", 300, 200, Rotation.DEG_90)
        assert result.failure_reason == FailureReason.ROTATION_MISMATCH

    def test_upright_hard_shape_snaps_without_rotation(self):
        machine = GameStateMachine(GameConfig(seed=77, default_difficulty="hard"))
        machine.start()
        puzzle = machine.request_puzzle(1024, 768)
        target = next(t for t in puzzle.targets if t.required_rotation == Rotation.DEG_0)
        slot = next(s for s in puzzle.shapes if s.shape.type == target.shape_type)
        assert slot.shape.rotation == Rotation.DEG_0
        result = machine.drop(slot.shape.id, target.x, target.y)
        assert result.should_snap
        assert result.failure_reason is None
        assert machine.state.puzzle.get_target(target.id).placed_shape_id == slot.shape.id

    def test_threshold_from_config(self, small_puzzle):
        machine = GameStateMachine(GameConfig(snap_threshold=10))
        machine.start()
        machine.puzzle_ready(small_puzzle)
        assert machine.drop("sq1", 320, 200).should_snap is False
        assert machine.drop("sq1", 305, 200).should_snap is True


class TestObservers:
    def test_handlers_see_post_transition_state(self, playing):
        seen = []
        playing.subscribe(events.STAGE_CLEARED, lambda e: seen.append((e.state.phase, playing.state.phase)))
        playing.place("sq1")
        playing.place("re1")
        assert seen == [(GamePhase.STAGE_CLEAR, GamePhase.STAGE_CLEAR)]

    def test_unsubscribe(self, machine):
        rec = EventRecorder()
        unsubscribe = machine.subscribe(events.PHASE_CHANGED, rec)
        machine.start()
        unsubscribe()
        machine.reset()
        assert rec.names == [events.PHASE_CHANGED]

    def test_event_to_dict(self, playing):
        rec = EventRecorder()
        playing.subscribe(events.SHAPE_PLACED, rec)
        playing.place("sq1")
        data = rec.events[0].to_dict()
        assert data["event"] == "shapePlaced"
        assert data["phase"] == "playing"
        assert data["placed"] == 1
        assert data["shape_id"] == "sq1"


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_full_game_through_drops(difficulty):
    machine = GameStateMachine(GameConfig(seed=77, default_difficulty=difficulty))
    machine.start()
    while machine.state.phase != GamePhase.GAME_CLEAR:
        if machine.state.phase == GamePhase.STAGE_CLEAR:
            machine.next()
            continue
        puzzle = machine.request_puzzle(1024, 768)
        for slot, target in zip(puzzle.shapes, puzzle.targets):
            rotation = target.required_rotation if target.required_rotation is not None else Rotation.DEG_0
            result = machine.drop(slot.shape.id, target.x, target.y, rotation)
            assert result is not None and result.should_snap
        assert machine.state.phase == GamePhase.STAGE_CLEAR
    assert machine.state.current_stage == 5

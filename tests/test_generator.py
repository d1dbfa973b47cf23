from __future__ import annotations

import re

import pytest

from shapefit.core.base import Difficulty, PlannedTarget, Rotation, ShapeType
from shapefit.core.config import DIFFICULTY_CONFIG, DifficultyConfig, GameConfig, default_difficulties
from shapefit.core.registry import LAYOUT_REGISTRY, get_layout
from shapefit.puzzle.generator import (
    TRAY_BOTTOM_MARGIN, PuzzleGenerator, assign_tray_positions, generate_puzzle, tray_positions
)
from shapefit.puzzle.layouts import GridLayout, SilhouetteLayout, grid_positions, layout_center
from shapefit.puzzle.random_source import RandomSource
from shapefit.shapes.catalog import SHAPE_COLORS, get_shape_size
from shapefit.shapes.templates import templates_for

W, H = 1024, 768


def _order(points):
    return sorted(range(len(points)), key=lambda i: points[i])


class TestRandomSource:
    def test_same_seed_same_sequence(self):
        a, b = RandomSource(5), RandomSource(5)
        assert [a.randint(100) for _ in range(10)] == [b.randint(100) for _ in range(10)]

    def test_shuffle_returns_permutation_copy(self):
        items = [1, 2, 3, 4, 5]
        shuffled = RandomSource(1).shuffle(items)
        assert sorted(shuffled) == items
        assert items == [1, 2, 3, 4, 5]

    def test_choice_of_empty_raises(self):
        with pytest.raises(ValueError):
            RandomSource(1).choice([])

    def test_token_is_base36(self):
        token = RandomSource(9).token()
        assert re.fullmatch(r"[0-9a-z]{7}", token)


class TestRegistry:
    def test_builtin_strategies_registered(self):
        assert LAYOUT_REGISTRY["grid"] is GridLayout
        assert LAYOUT_REGISTRY["template"] is SilhouetteLayout
        assert isinstance(get_layout("grid"), GridLayout)

    def test_unknown_strategy(self):
        with pytest.raises(KeyError):
            get_layout("spiral")


class TestGridLayout:
    def test_three_targets_on_two_by_two_grid(self):
        positions = grid_positions(3, W, H)
        # area 500 x 384 centred at (512, 334)
        assert positions[0] == pytest.approx((387.0, 238.0))
        assert positions[1] == pytest.approx((637.0, 238.0))
        assert positions[2] == pytest.approx((387.0, 430.0))

    def test_area_is_capped(self):
        xs = [x for x, _ in grid_positions(4, 4000, 3000)]
        cx, _ = layout_center(4000, 3000)
        assert max(xs) - min(xs) == pytest.approx(250.0)
        assert (max(xs) + min(xs)) / 2 == pytest.approx(cx)


class TestTray:
    def test_band_is_evenly_spaced(self):
        assert tray_positions(3, 1000, 800) == [(250, 700), (500, 700), (750, 700)]

    @pytest.mark.parametrize("seed", range(25))
    def test_tray_order_never_matches_target_order(self, seed):
        planned = [PlannedTarget(ShapeType.SQUARE, x, y) for x, y in grid_positions(4, W, H)]
        positions = assign_tray_positions(planned, W, H, RandomSource(seed))
        assert sorted(positions) == sorted(tray_positions(4, W, H))
        assert _order(positions) != _order([(p.x, p.y) for p in planned])


class TestGenerator:
    @pytest.mark.parametrize("difficulty", list(Difficulty))
    def test_counts_and_types(self, difficulty):
        tier = DIFFICULTY_CONFIG[difficulty]
        puzzle = generate_puzzle(difficulty, W, H, seed=7)
        assert len(puzzle.shapes) == tier.shape_count
        assert len(puzzle.targets) == tier.shape_count
        for slot, target in zip(puzzle.shapes, puzzle.targets):
            assert slot.shape.type in tier.available_shapes
            assert target.shape_type == slot.shape.type
            assert target.id == f"target-{slot.shape.id}"
            assert (slot.shape.width, slot.shape.height) == get_shape_size(slot.shape.type)
            assert (target.width, target.height) == get_shape_size(target.shape_type)
            assert slot.shape.color in SHAPE_COLORS
            assert slot.shape.rotation == Rotation.DEG_0
            assert slot.is_placed is False
            assert target.placed_shape_id is None

    def test_ids_unique(self):
        puzzle = generate_puzzle(Difficulty.HARD, W, H, seed=3)
        ids = [s.shape.id for s in puzzle.shapes]
        assert len(ids) == len(set(ids))

    def test_easy_targets_on_grid(self):
        puzzle = generate_puzzle(Difficulty.EASY, W, H, seed=21)
        assert [(t.x, t.y) for t in puzzle.targets] == grid_positions(3, W, H)
        assert all(t.required_rotation is None for t in puzzle.targets)

    def test_initial_positions_form_tray_band(self):
        puzzle = generate_puzzle(Difficulty.NORMAL, W, H, seed=4)
        xs = sorted(s.initial_x for s in puzzle.shapes)
        assert xs == pytest.approx([W / 5 * i for i in range(1, 5)])
        assert all(s.initial_y == H - TRAY_BOTTOM_MARGIN for s in puzzle.shapes)

    def test_normal_reproduces_a_template(self):
        puzzle = generate_puzzle(Difficulty.NORMAL, W, H, seed=8)
        cx, cy = layout_center(W, H)
        layout = sorted((t.shape_type.value, round(t.x - cx, 2), round(t.y - cy, 2)) for t in puzzle.targets)
        tier = DIFFICULTY_CONFIG[Difficulty.NORMAL]
        candidates = [
            sorted((s.type.value, round(s.relative_x, 2), round(s.relative_y, 2)) for s in t.shapes)
            for t in templates_for(tier.shape_count, tier.available_shapes)
        ]
        assert layout in candidates
        assert all(t.required_rotation is None for t in puzzle.targets)

    def test_hard_requires_rotation(self):
        puzzle = generate_puzzle(Difficulty.HARD, W, H, seed=8)
        assert all(t.required_rotation is not None for t in puzzle.targets)
        assert any(t.required_rotation != Rotation.DEG_0 for t in puzzle.targets)

    def test_grid_tier_with_rotation_requires_upright(self):
        difficulties = default_difficulties()
        difficulties[Difficulty.EASY] = DifficultyConfig(
            shape_count=3,
            available_shapes=[ShapeType.SQUARE],
            layout_strategy="grid",
            enable_rotation=True,
        )
        config = GameConfig(difficulties=difficulties)
        puzzle = generate_puzzle(Difficulty.EASY, W, H, seed=1, config=config)
        assert all(t.required_rotation == Rotation.DEG_0 for t in puzzle.targets)

    def test_seed_reproduces_puzzle(self):
        assert generate_puzzle("hard", W, H, seed=42) == generate_puzzle("hard", W, H, seed=42)
        assert generate_puzzle("easy", W, H, seed=42) != generate_puzzle("easy", W, H, seed=43)

    def test_config_seed_is_used(self):
        config = GameConfig(seed=99)
        assert generate_puzzle("normal", W, H, config=config) == generate_puzzle("normal", W, H, seed=99)

    def test_viewport_moves_targets(self):
        small = generate_puzzle(Difficulty.NORMAL, 800, 600, seed=5)
        large = generate_puzzle(Difficulty.NORMAL, 1200, 900, seed=5)
        dx = large.targets[0].x - small.targets[0].x
        dy = large.targets[0].y - small.targets[0].y
        assert (dx, dy) == pytest.approx((200, 150))

    def test_generator_defaults_to_config_viewport(self):
        config = GameConfig(viewport_width=800, viewport_height=600, seed=2)
        puzzle = PuzzleGenerator(config).generate(Difficulty.EASY)
        assert all(s.initial_y == 600 - TRAY_BOTTOM_MARGIN for s in puzzle.shapes)

    def test_incompatible_template_tier_raises(self):
        difficulties = default_difficulties()
        difficulties[Difficulty.NORMAL] = DifficultyConfig(
            shape_count=6,
            available_shapes=[ShapeType.SQUARE],
            layout_strategy="template",
        )
        generator = PuzzleGenerator(GameConfig(difficulties=difficulties), RandomSource(0))
        with pytest.raises(ValueError):
            generator.generate(Difficulty.NORMAL)

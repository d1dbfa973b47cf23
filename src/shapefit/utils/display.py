"""
User-friendly display utilities for shapefit.
"""

import time
from typing import Any, Dict, Iterable, Optional
from datetime import datetime

from shapefit.core.base import GameState, PuzzleTemplate


class StatusDisplay:
    """Handles status display for different operations."""

    @staticmethod
    def print_header(title: str, width: int = 80):
        """Print a formatted header."""
        print("\n" + "=" * width)
        print(f"{title:^{width}}")
        print("=" * width)

    @staticmethod
    def print_section(title: str, width: int = 60):
        """Print a section header."""
        print(f"\n📋 {title}")
        print("-" * width)

    @staticmethod
    def print_config(config_dict: Dict[str, Any], title: str = "Configuration"):
        """Print configuration in a nice format."""
        StatusDisplay.print_section(title)
        for key, value in config_dict.items():
            if isinstance(value, dict):
                print(f"  {key}:")
                for sub_key, sub_value in value.items():
                    print(f"    {sub_key:<18} : {sub_value}")
            else:
                print(f"  {key:<20} : {value}")

    @staticmethod
    def print_status(message: str, status: str = "info"):
        """Print a status message with appropriate emoji."""
        icons = {
            "info": "ℹ️",
            "success": "✅",
            "warning": "⚠️",
            "error": "❌",
            "loading": "⏳",
            "processing": "🔄"
        }
        icon = icons.get(status, "ℹ️")
        timestamp = datetime.now().strftime("%H:%M:%S")
        print(f"{icon} [{timestamp}] {message}")

    @staticmethod
    def print_results(results: Dict[str, Any], title: str = "Results"):
        """Print results in a nice format."""
        StatusDisplay.print_section(title)
        for key, value in results.items():
            if isinstance(value, bool):
                icon = "✅" if value else "❌"
                print(f"  {key:<20} : {icon} {value}")
            elif isinstance(value, float):
                print(f"  {key:<20} : {value:.2f}")
            else:
                print(f"  {key:<20} : {value}")

    @staticmethod
    def print_table(rows: Iterable[Dict[str, Any]], columns: Iterable[str]):
        """Print rows as a fixed-width table."""
        columns = list(columns)
        rows = list(rows)
        widths = {
            col: max([len(col)] + [len(str(row.get(col, ""))) for row in rows])
            for col in columns
        }
        print("  " + "  ".join(f"{col:<{widths[col]}}" for col in columns))
        print("  " + "  ".join("-" * widths[col] for col in columns))
        for row in rows:
            print("  " + "  ".join(f"{str(row.get(col, '')):<{widths[col]}}" for col in columns))

    @staticmethod
    def print_puzzle(puzzle: PuzzleTemplate, placed: Optional[Iterable[str]] = None):
        """Print the shapes and targets of a puzzle."""
        placed = set(placed or ())
        StatusDisplay.print_section("Shapes")
        for slot in puzzle.shapes:
            shape = slot.shape
            mark = "✅" if shape.id in placed or slot.is_placed else "  "
            print(f"  {mark} {shape.id}  {shape.type.value:<20} "
                  f"start=({slot.initial_x:.0f}, {slot.initial_y:.0f})  rot={int(shape.rotation)}")
        StatusDisplay.print_section("Targets")
        for target in puzzle.targets:
            rotation = "-" if target.required_rotation is None else int(target.required_rotation)
            holder = target.placed_shape_id or "open"
            print(f"  {target.id:<16} {target.shape_type.value:<20} "
                  f"at=({target.x:.1f}, {target.y:.1f})  rot={rotation}  [{holder}]")

    @staticmethod
    def print_state(state: GameState, total_stages: int):
        """Print a one-line summary of the game state."""
        total = len(state.puzzle.shapes) if state.puzzle is not None else 0
        print(f"🎮 Stage {state.current_stage}/{total_stages} | "
              f"{state.difficulty.value} | {state.phase.value} | "
              f"placed {len(state.placed_shape_ids)}/{total}")

    @staticmethod
    def print_separator(char: str = "-", length: int = 60):
        """Print a separator line."""
        print(char * length)


class LiveLogger:
    """Live logging with real-time updates."""

    def __init__(self, verbose: bool = True):
        self.verbose = verbose
        self.stage_times = {}

    def log_stage_start(self, stage: int, description: str = ""):
        """Log the start of a stage."""
        if self.verbose:
            message = f"Starting stage {stage}"
            if description:
                message += f": {description}"
            StatusDisplay.print_status(message, "processing")
        self.stage_times[stage] = time.time()

    def log_stage_end(self, stage: int, result: str, success: bool = True):
        """Log the end of a stage."""
        if self.verbose:
            elapsed = time.time() - self.stage_times.get(stage, time.time())
            status = "success" if success else "error"
            StatusDisplay.print_status(f"Stage {stage} {result} ({elapsed:.2f}s)", status)

    def log_action(self, action_name: str, details: str = ""):
        """Log an action being performed."""
        if self.verbose:
            message = f"Executing: {action_name}"
            if details:
                message += f" - {details}"
            StatusDisplay.print_status(message, "processing")

    def log_result(self, message: str, success: bool = True):
        """Log a result."""
        if self.verbose:
            status = "success" if success else "error"
            StatusDisplay.print_status(message, status)

    def log_info(self, message: str):
        """Log an info message."""
        if self.verbose:
            StatusDisplay.print_status(message, "info")

    def log_warning(self, message: str):
        """Log a warning message."""
        if self.verbose:
            StatusDisplay.print_status(message, "warning")

    def log_error(self, message: str):
        """Log an error message."""
        if self.verbose:
            StatusDisplay.print_status(message, "error")

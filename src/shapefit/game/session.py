"""
Text play session - a simple command line front end for the game core.
"""

from typing import Callable, Dict, List, Optional

from shapefit.core.base import GamePhase, Rotation, TargetSlot
from shapefit.game.snap import matches_target
from shapefit.game.state_machine import GameStateMachine
from shapefit.utils.display import LiveLogger, StatusDisplay
from shapefit.utils.renderer import render_puzzle


class PlaySession:
    """Drives a GameStateMachine from typed commands or an automatic solver."""

    def __init__(self, machine: GameStateMachine,
                 viewport_width: Optional[float] = None,
                 viewport_height: Optional[float] = None,
                 live_logger: Optional[LiveLogger] = None):
        self.machine = machine
        self.viewport_width = viewport_width if viewport_width is not None else machine.config.viewport_width
        self.viewport_height = viewport_height if viewport_height is not None else machine.config.viewport_height
        self.live = live_logger if live_logger is not None else LiveLogger(verbose=True)
        self.held_rotations: Dict[str, Rotation] = {}

    def begin(self):
        """Leave the menu if needed and make sure the stage has a puzzle."""
        if self.machine.state.phase == GamePhase.MENU:
            self.machine.start()
        if self.machine.state.phase == GamePhase.PLAYING and self.machine.state.puzzle is None:
            self.held_rotations.clear()
            self.live.log_stage_start(self.machine.state.current_stage, self.machine.state.difficulty.value)
            self.machine.request_puzzle(self.viewport_width, self.viewport_height)

    def show_state(self):
        """Print the current state and puzzle."""
        state = self.machine.state
        StatusDisplay.print_state(state, self.machine.total_stages)
        if state.puzzle is not None:
            StatusDisplay.print_separator()
            StatusDisplay.print_puzzle(state.puzzle, state.placed_shape_ids)
        if state.phase == GamePhase.STAGE_CLEAR:
            print("\n🏁 Stage clear! Type 'next' to continue.")
        elif state.phase == GamePhase.GAME_CLEAR:
            print("\n🎉 ALL STAGES CLEAR! 🎉")

    def rotate(self, shape_id: str) -> Optional[Rotation]:
        """Turn a shape in hand a quarter turn clockwise."""
        state = self.machine.state
        slot = state.puzzle.get_slot(shape_id) if state.puzzle is not None else None
        if slot is None or slot.is_placed:
            self.live.log_warning(f"Cannot rotate '{shape_id}' now")
            return None
        rotation = self.held_rotations.get(shape_id, slot.shape.rotation).next()
        self.held_rotations[shape_id] = rotation
        self.live.log_info(f"{shape_id} turned to {int(rotation)} degrees")
        return rotation

    def drop(self, shape_id: str, x: float, y: float, rotation: Optional[Rotation] = None) -> bool:
        """Drop a shape and report the outcome. Returns True if it snapped."""
        if rotation is None:
            rotation = self.held_rotations.get(shape_id)
        result = self.machine.drop(shape_id, x, y, rotation)
        if result is None:
            self.live.log_warning(f"Cannot drop '{shape_id}' now")
            return False
        if result.should_snap:
            self.live.log_result(f"{shape_id} snapped into place")
            if self.machine.state.phase == GamePhase.STAGE_CLEAR:
                self.live.log_stage_end(self.machine.state.current_stage, "cleared")
            return True
        dx, dy = result.relative_offset
        self.live.log_result(
            f"{shape_id} did not snap: {result.failure_reason.value} (offset {dx:.0f}, {dy:.0f})",
            success=False,
        )
        return False

    def advance(self):
        """Move on after a cleared stage and fetch the next puzzle."""
        self.machine.next()
        if self.machine.state.phase == GamePhase.GAME_CLEAR:
            self.live.log_result("All stages cleared")
        else:
            self.begin()

    def _solution_target(self, shape_id: str) -> Optional[TargetSlot]:
        state = self.machine.state
        slot = state.puzzle.get_slot(shape_id)
        for target in state.puzzle.open_targets():
            required = target.required_rotation
            if matches_target(slot.shape.type, required if required is not None else slot.shape.rotation, target):
                return target
        return None

    def auto_solve(self, on_stage_clear: Optional[Callable[[int], None]] = None) -> List[Dict]:
        """
        Play every remaining stage by dropping each shape on a matching target.

        Args:
            on_stage_clear: Optional callback receiving the cleared stage number

        Returns:
            One summary dict per cleared stage
        """
        cleared: List[Dict] = []
        self.begin()
        while self.machine.state.phase != GamePhase.GAME_CLEAR:
            state = self.machine.state
            if state.phase == GamePhase.STAGE_CLEAR:
                if on_stage_clear is not None:
                    on_stage_clear(state.current_stage)
                self.advance()
                continue

            pending = [s for s in state.puzzle.shapes if not s.is_placed]
            drops = 0
            for slot in pending:
                target = self._solution_target(slot.shape.id)
                if target is None:
                    raise RuntimeError(f"No open target fits shape {slot.shape.id}")
                self.live.log_action("drop", f"{slot.shape.type.value} -> {target.id}")
                self.drop(slot.shape.id, target.x, target.y, target.required_rotation)
                drops += 1
            cleared.append({
                "stage": state.current_stage,
                "difficulty": state.difficulty.value,
                "shapes": len(state.puzzle.shapes),
                "drops": drops,
            })
            if self.machine.state.phase != GamePhase.STAGE_CLEAR:
                raise RuntimeError(f"Stage {state.current_stage} did not clear")
        return cleared

    def render(self, output_path: str) -> bool:
        """Save a PNG preview of the current puzzle."""
        state = self.machine.state
        if state.puzzle is None:
            print("No puzzle loaded")
            return False
        tier = self.machine.config.difficulty_config(state.difficulty)
        image = render_puzzle(state.puzzle, int(self.viewport_width), int(self.viewport_height),
                              show_grid_lines=tier.show_grid_lines)
        image.save(output_path)
        print(f"📷 Saved preview to {output_path}")
        return True

    def run_cli(self, input_fn: Callable[[str], str] = input):
        """Run the interactive command loop."""
        print("=== Shape Fit ===")
        print("Type 'help' for commands")
        self.begin()
        self.show_state()

        while True:
            try:
                cmd = input_fn("\n> ").strip()
            except EOFError:
                print("Goodbye!")
                break

            if not cmd:
                continue

            parts = cmd.split()
            command = parts[0].lower()

            try:
                if command == "help":
                    self.show_help()

                elif command == "state":
                    self.show_state()

                elif command == "drop":
                    if len(parts) < 4:
                        print("Usage: drop <shape_id> <x> <y> [rotation]")
                    else:
                        rotation = Rotation(int(parts[4])) if len(parts) > 4 else None
                        self.drop(parts[1], float(parts[2]), float(parts[3]), rotation)

                elif command == "rotate":
                    if len(parts) < 2:
                        print("Usage: rotate <shape_id>")
                    else:
                        self.rotate(parts[1])

                elif command == "difficulty":
                    if len(parts) < 2:
                        print("Usage: difficulty <easy|normal|hard>")
                    else:
                        self.machine.set_difficulty(parts[1].lower())
                        print(f"Difficulty set to {self.machine.state.difficulty.value}")

                elif command == "next":
                    self.advance()
                    self.show_state()

                elif command == "solve":
                    self.auto_solve()
                    self.show_state()

                elif command == "render":
                    if len(parts) < 2:
                        print("Usage: render <output.png>")
                    else:
                        self.render(parts[1])

                elif command == "reset":
                    self.machine.reset()
                    self.begin()
                    self.show_state()

                elif command == "quit" or command == "exit":
                    print("Goodbye!")
                    break

                else:
                    print(f"Unknown command: {command}")
                    print("Type 'help' for commands")

            except (ValueError, KeyError) as e:
                print(f"Error: {e}")

    def show_help(self):
        """Show available commands."""
        print("""
Available commands:
  help                         - Show this help
  state                        - Show current game state
  drop <id> <x> <y> [rot]      - Drop a shape at (x, y), rotated by 0/90/180/270
  rotate <id>                  - Turn a shape a quarter turn clockwise
  difficulty <level>           - Change difficulty (easy, normal, hard)
  next                         - Continue after a cleared stage
  solve                        - Solve the remaining stages automatically
  render <file.png>            - Save a preview image of the puzzle
  reset                        - Back to stage 1
  quit/exit                    - Exit the game
        """)

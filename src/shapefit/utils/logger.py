import os
import json
import pandas as pd
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from PIL import Image

from shapefit.game import events
from shapefit.game.events import GameEvent
if TYPE_CHECKING:
    from shapefit.game.state_machine import GameStateMachine


class SessionLogger:
    def __init__(self, log_dir: str, session_name: str):
        """
        Initializes the logger for a play session.

        Args:
            log_dir (str): The base directory for logs.
            session_name (str): A name for the session; a timestamp is appended.
        """
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.session_name = f"{session_name}_{self.timestamp}"
        self.run_dir = os.path.join(log_dir, self.session_name)
        self.images_dir = os.path.join(self.run_dir, "images")
        self.logs: List[Dict[str, Any]] = []
        self.stage_results: List[Dict[str, Any]] = []
        self._step = 0
        self._stage_drops = 0
        self._stage_started: Optional[datetime] = None
        self._detach: Optional[Callable[[], None]] = None

        os.makedirs(self.run_dir, exist_ok=True)
        os.makedirs(self.images_dir, exist_ok=True)

    def log_step(self, step: int, data: Dict[str, Any], verbose: bool = True):
        """
        Logs a single step of the session.

        Args:
            step (int): The current step number.
            data (Dict[str, Any]): A dictionary of data to log for the step.
            verbose (bool): Whether to print step information to console.
        """
        log_entry = {"step": step, "timestamp": datetime.now().isoformat(), **data}

        if "image" in log_entry and isinstance(log_entry["image"], Image.Image):
            image_path = os.path.join(self.images_dir, f"step_{step}.png")
            log_entry["image"].save(image_path)
            log_entry["image_path"] = image_path
            del log_entry["image"]

            if verbose:
                print(f"  📷 Saved image: step_{step}.png")

        if verbose:
            event = data.get("event", "unknown")
            if event == events.PUZZLE_READY:
                print(f"🧩 Step {step}: Puzzle ready ({data.get('shape_count')} shapes)")
            elif event == events.SHAPE_PLACED:
                print(f"✅ Step {step}: Placed {data.get('shape_id')}")
            elif event == events.STAGE_CLEARED:
                print(f"🏁 Step {step}: Stage {data.get('cleared_stage')} cleared")
            elif event == events.GAME_CLEARED:
                print(f"🎉 Step {step}: Game cleared")
            elif event == events.COMMAND_IGNORED:
                print(f"⚠️ Step {step}: Ignored '{data.get('command')}' ({data.get('reason')})")

        self.logs.append(log_entry)

    def attach(self, machine: "GameStateMachine", verbose: bool = False) -> Callable[[], None]:
        """
        Log every event the machine emits as a step.

        Returns:
            A callable that detaches the logger again
        """
        def on_event(event: GameEvent):
            self._record_stage(event)
            self.log_step(self.next_step(), event.to_dict(), verbose=verbose)

        self._detach = machine.subscribe(events.ALL_EVENTS, on_event)
        return self._detach

    def next_step(self) -> int:
        self._step += 1
        return self._step

    def detach(self):
        if self._detach is not None:
            self._detach()
            self._detach = None

    def _record_stage(self, event: GameEvent):
        if event.name == events.PUZZLE_READY:
            self._stage_drops = 0
            self._stage_started = datetime.now()
        elif event.name == events.SHAPE_SNAPPED:
            self._stage_drops += 1
        elif event.name == events.STAGE_CLEARED:
            elapsed = None
            if self._stage_started is not None:
                elapsed = (datetime.now() - self._stage_started).total_seconds()
            self.stage_results.append({
                "stage": event.payload.get("cleared_stage"),
                "difficulty": event.state.difficulty.value,
                "shape_count": len(event.state.puzzle.shapes) if event.state.puzzle else 0,
                "snaps": self._stage_drops,
                "seconds": elapsed,
            })

    def save_logs(self):
        """Saves all collected logs to a JSON file."""
        log_file = os.path.join(self.run_dir, "session_log.json")
        with open(log_file, "w") as f:
            json.dump(self.logs, f, indent=2, default=str)

        summary_file = os.path.join(self.run_dir, "summary.txt")
        self._create_summary_file(summary_file)

        print(f"📁 Logs saved to: {log_file}")
        print(f"📋 Summary saved to: {summary_file}")
        return log_file

    def _create_summary_file(self, summary_file: str):
        """Create a human-readable summary file."""
        placements = len([log for log in self.logs if log.get("event") == events.SHAPE_PLACED])
        ignored = len([log for log in self.logs if log.get("event") == events.COMMAND_IGNORED])
        game_cleared = any(log.get("event") == events.GAME_CLEARED for log in self.logs)

        with open(summary_file, "w") as f:
            f.write(f"Session Summary: {self.session_name}\n")
            f.write("=" * 60 + "\n")
            f.write(f"Events Logged: {len(self.logs)}\n")
            f.write(f"Stages Cleared: {len(self.stage_results)}\n")
            f.write(f"Shapes Placed: {placements}\n")
            f.write(f"Commands Ignored: {ignored}\n")
            f.write(f"Game Cleared: {game_cleared}\n")
            f.write(f"Images Saved: {len([log for log in self.logs if 'image_path' in log])}\n")
            f.write("\nStep-by-step breakdown:\n")
            f.write("-" * 30 + "\n")

            for log in self.logs:
                step = log.get("step", "?")
                event = log.get("event", "unknown")
                if event == events.SHAPE_PLACED:
                    f.write(f"Step {step}: Placed {log.get('shape_id')} on {log.get('target_id')}\n")
                elif event == events.STAGE_CLEARED:
                    f.write(f"Step {step}: Stage {log.get('cleared_stage')} cleared\n")
                elif event == events.COMMAND_IGNORED:
                    f.write(f"Step {step}: IGNORED {log.get('command')} - {log.get('reason')}\n")
                else:
                    f.write(f"Step {step}: {event} (phase {log.get('phase')})\n")

    def save_stage_results(self, csv_path: Optional[str] = None) -> str:
        """
        Saves one row per cleared stage to a CSV file.
        If the file exists, the new rows are appended.

        Args:
            csv_path (str): Output path; defaults to stage_results.csv in the run directory.
        """
        if csv_path is None:
            csv_path = os.path.join(self.run_dir, "stage_results.csv")
        results_df = pd.DataFrame(
            self.stage_results,
            columns=["stage", "difficulty", "shape_count", "snaps", "seconds"],
        )

        if os.path.exists(csv_path):
            try:
                existing_df = pd.read_csv(csv_path)
                updated_df = pd.concat([existing_df, results_df], ignore_index=True)
            except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
                print(f"Could not read existing results file: {e}. Creating a new one.")
                updated_df = results_df
        else:
            updated_df = results_df

        updated_df.to_csv(csv_path, index=False)
        print(f"Results saved to {csv_path}")
        return csv_path

"""
Command-line interface for shapefit.

Generates puzzles, evaluates single drops, renders previews, plays the game
in the terminal and manages configuration files.
"""

import argparse
import sys
import json
from dataclasses import replace
from typing import List, Optional
from pathlib import Path

import yaml
from dotenv import load_dotenv

from shapefit.core.base import Difficulty, DropAttempt, Rotation, ShapeType, TargetSlot
from shapefit.core.config import GameConfig, load_config, create_default_config, validate_config
from shapefit.core.registry import LAYOUT_REGISTRY
from shapefit.game.session import PlaySession
from shapefit.game.snap import evaluate
from shapefit.game.state_machine import GameStateMachine
from shapefit.puzzle.generator import generate_puzzle
from shapefit.shapes.catalog import get_shape_size
from shapefit.shapes.templates import PUZZLE_TEMPLATES, describe_templates, templates_for
from shapefit.utils.display import StatusDisplay, LiveLogger
from shapefit.utils.logger import SessionLogger
from shapefit.utils.renderer import render_puzzle


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    difficulties = [d.value for d in Difficulty]
    shape_types = [s.value for s in ShapeType]
    rotations = [int(r) for r in Rotation]

    parser = argparse.ArgumentParser(
        description="shapefit: shape-matching puzzle generator and game core",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  # Generate a puzzle as JSON
  shapefit generate --difficulty normal --seed 7

  # Check whether a drop snaps
  shapefit snap --x 530 --y 400 --shape-type square --target-x 500 --target-y 400 --target-type square

  # Render a preview image
  shapefit render --difficulty hard --output puzzle.png

  # Play all stages automatically and keep the logs
  shapefit play --auto --log-dir logs/

  # Create and validate a configuration
  shapefit create-config --output config.yaml
  shapefit validate-config config.yaml

Layout strategies: {', '.join(sorted(LAYOUT_REGISTRY)) or 'None registered'}
Difficulties: {', '.join(difficulties)}
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_puzzle_options(sub):
        sub.add_argument("--config", "-c", help="Path to configuration file")
        sub.add_argument("--difficulty", "-d", choices=difficulties, help="Difficulty tier")
        sub.add_argument("--width", type=int, help="Viewport width in px")
        sub.add_argument("--height", type=int, help="Viewport height in px")
        sub.add_argument("--seed", type=int, help="Random seed")

    # Generate command
    generate_parser = subparsers.add_parser("generate", help="Generate a puzzle and print it as JSON")
    add_puzzle_options(generate_parser)
    generate_parser.add_argument("--output", "-o", help="Write JSON to this file instead of stdout")

    # Snap command
    snap_parser = subparsers.add_parser("snap", help="Evaluate one drop against one target")
    snap_parser.add_argument("--x", type=float, required=True, help="Drop x")
    snap_parser.add_argument("--y", type=float, required=True, help="Drop y")
    snap_parser.add_argument("--shape-type", choices=shape_types, required=True, help="Dragged shape type")
    snap_parser.add_argument("--rotation", type=int, choices=rotations, help="Dragged shape rotation")
    snap_parser.add_argument("--target-x", type=float, required=True, help="Target anchor x")
    snap_parser.add_argument("--target-y", type=float, required=True, help="Target anchor y")
    snap_parser.add_argument("--target-type", choices=shape_types, required=True, help="Target shape type")
    snap_parser.add_argument("--required-rotation", type=int, choices=rotations, help="Rotation the target requires")
    snap_parser.add_argument("--threshold", type=float, help="Snap distance in px (default from config)")

    # Render command
    render_parser = subparsers.add_parser("render", help="Render a generated puzzle to PNG")
    add_puzzle_options(render_parser)
    render_parser.add_argument("--output", "-o", required=True, help="Output PNG file")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    add_puzzle_options(play_parser)
    play_parser.add_argument("--auto", action="store_true", help="Solve every stage automatically")
    play_parser.add_argument("--log-dir", help="Write session logs to this directory")
    play_parser.add_argument("--save-images", action="store_true", help="Store a preview image per cleared stage")
    play_parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")

    # List templates command
    list_parser = subparsers.add_parser("list-templates", help="List silhouette templates")
    list_parser.add_argument("--difficulty", "-d", choices=difficulties, help="Only templates usable by this tier")
    list_parser.add_argument("--format", choices=["table", "json"], default="table", help="Output format")

    # Create config command
    config_parser = subparsers.add_parser("create-config", help="Create default configuration file")
    config_parser.add_argument("--output", "-o", default="config.yaml", help="Output configuration file")
    config_parser.add_argument("--difficulty", choices=difficulties, default="easy", help="Default difficulty")
    config_parser.add_argument("--snap-threshold", type=float, help="Snap distance in px")
    config_parser.add_argument("--seed", type=int, help="Random seed")
    config_parser.add_argument("--force", action="store_true", help="Overwrite an existing file")

    # Validate config command
    validate_parser = subparsers.add_parser("validate-config", help="Validate configuration file")
    validate_parser.add_argument("config", help="Configuration file to validate")
    validate_parser.add_argument("--strict", action="store_true", help="Treat warnings as errors")

    return parser


def _load_game_config(args, logger: LiveLogger) -> Optional[GameConfig]:
    """Load the configuration (or defaults) and apply command line overrides."""
    try:
        if getattr(args, "config", None):
            logger.log_action("Loading configuration", args.config)
            config = load_config(args.config)
            logger.log_result("Configuration loaded")
        else:
            config = GameConfig()
    except FileNotFoundError:
        logger.log_error(f"Configuration file not found: {args.config}")
        logger.log_info("Use 'shapefit create-config' to create a default configuration")
        return None
    except (yaml.YAMLError, ValueError) as e:
        logger.log_error(f"Configuration error: {e}")
        return None

    overrides = {}
    if getattr(args, "difficulty", None):
        overrides["default_difficulty"] = Difficulty(args.difficulty)
    if getattr(args, "width", None):
        overrides["viewport_width"] = args.width
    if getattr(args, "height", None):
        overrides["viewport_height"] = args.height
    if getattr(args, "seed", None) is not None:
        overrides["seed"] = args.seed
    return replace(config, **overrides) if overrides else config


def generate_command(args) -> int:
    """Execute generate command."""
    logger = LiveLogger(verbose=False)

    config = _load_game_config(args, logger)
    if config is None:
        return 1

    try:
        puzzle = generate_puzzle(
            config.default_difficulty, config.viewport_width, config.viewport_height, config=config
        )
    except ValueError as e:
        logger.verbose = True
        logger.log_error(f"Failed to generate puzzle: {e}")
        return 1

    document = {
        "difficulty": config.default_difficulty.value,
        "viewport": [config.viewport_width, config.viewport_height],
        "seed": config.seed,
        **puzzle.to_dict(),
    }
    text = json.dumps(document, indent=2)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        StatusDisplay.print_status(f"Puzzle written to {args.output}", "success")
    else:
        print(text)
    return 0


def snap_command(args) -> int:
    """Execute snap command."""
    threshold = args.threshold
    if threshold is None:
        threshold = GameConfig().snap_threshold

    target_type = ShapeType(args.target_type)
    width, height = get_shape_size(target_type)
    target = TargetSlot(
        id="target",
        shape_type=target_type,
        x=args.target_x,
        y=args.target_y,
        width=width,
        height=height,
        required_rotation=Rotation(args.required_rotation) if args.required_rotation is not None else None,
    )
    attempt = DropAttempt(
        x=args.x,
        y=args.y,
        shape_type=ShapeType(args.shape_type),
        rotation=Rotation(args.rotation) if args.rotation is not None else None,
    )
    result = evaluate(attempt, target, threshold)
    print(json.dumps(result.to_dict(), indent=2))
    return 0


def render_command(args) -> int:
    """Execute render command."""
    logger = LiveLogger(verbose=True)

    config = _load_game_config(args, logger)
    if config is None:
        return 1

    try:
        puzzle = generate_puzzle(
            config.default_difficulty, config.viewport_width, config.viewport_height, config=config
        )
        tier = config.difficulty_config(config.default_difficulty)
        image = render_puzzle(
            puzzle, config.viewport_width, config.viewport_height,
            show_grid_lines=tier.show_grid_lines,
        )
        image.save(args.output)
    except (ValueError, OSError) as e:
        logger.log_error(f"Failed to render puzzle: {e}")
        return 1

    logger.log_result(f"Preview saved to {args.output}")
    return 0


def play_command(args) -> int:
    """Execute play command."""
    logger = LiveLogger(verbose=True)

    config = _load_game_config(args, logger)
    if config is None:
        return 1

    StatusDisplay.print_header("shapefit")
    StatusDisplay.print_config({
        "Difficulty": config.default_difficulty.value,
        "Stages": config.total_stages,
        "Snap threshold": f"{config.snap_threshold:g}px",
        "Viewport": f"{config.viewport_width}x{config.viewport_height}",
        "Seed": config.seed if config.seed is not None else "random",
        "Mode": "auto" if args.auto else "interactive",
    }, "Game Configuration")

    machine = GameStateMachine(config)
    session = PlaySession(machine, live_logger=LiveLogger(verbose=args.auto or args.verbose))

    session_logger = None
    if args.log_dir:
        session_logger = SessionLogger(args.log_dir, f"shapefit_{config.default_difficulty.value}")
        session_logger.attach(machine, verbose=args.verbose)

    def snapshot(stage: int):
        if session_logger is not None and args.save_images:
            state = machine.state
            image = render_puzzle(state.puzzle, config.viewport_width, config.viewport_height)
            session_logger.log_step(session_logger.next_step(), {
                "event": "snapshot",
                "stage": stage,
                "image": image,
            }, verbose=args.verbose)

    try:
        if args.auto:
            stages = session.auto_solve(on_stage_clear=snapshot)
            StatusDisplay.print_results({
                "Stages cleared": len(stages),
                "Game cleared": len(stages) == config.total_stages,
            }, "Auto-play Results")
        else:
            session.run_cli()
    except KeyboardInterrupt:
        logger.log_warning("Game interrupted by user")
        return 1
    except (ValueError, RuntimeError) as e:
        logger.log_error(f"Game failed: {e}")
        return 1
    finally:
        if session_logger is not None:
            session_logger.detach()
            session_logger.save_logs()
            session_logger.save_stage_results()

    return 0


def list_templates_command(args) -> int:
    """Execute list-templates command."""
    templates = list(PUZZLE_TEMPLATES)
    if args.difficulty:
        tier = GameConfig().difficulty_config(Difficulty(args.difficulty))
        templates = templates_for(tier.shape_count, tier.available_shapes)

    rows = describe_templates(templates)
    if args.format == "json":
        print(json.dumps(rows, indent=2))
    else:
        StatusDisplay.print_header("Silhouette Templates")
        StatusDisplay.print_table(
            [{**row, "types": ", ".join(row["types"])} for row in rows],
            ["name", "shape_count", "rotated", "types"],
        )
    return 0


def create_config_command(args) -> int:
    """Execute create-config command."""
    logger = LiveLogger(verbose=True)

    output_path = Path(args.output)
    if output_path.exists() and not args.force:
        logger.log_error(f"{args.output} already exists (use --force to overwrite)")
        return 1

    try:
        if args.difficulty == "easy" and args.snap_threshold is None and args.seed is None:
            config = create_default_config(str(output_path))
        else:
            config = GameConfig(
                default_difficulty=Difficulty(args.difficulty),
                snap_threshold=args.snap_threshold,
                seed=args.seed,
            )
            with open(output_path, "w", encoding="utf-8") as f:
                yaml.dump(config.to_dict(), f, default_flow_style=False, indent=2, sort_keys=False)
    except (ValueError, OSError) as e:
        logger.log_error(f"Failed to create config: {e}")
        return 1

    logger.log_result(f"Configuration written to {output_path}")
    StatusDisplay.print_config({
        "Default difficulty": config.default_difficulty.value,
        "Snap threshold": config.snap_threshold,
        "Total stages": config.total_stages,
    }, "Configuration Overview")
    return 0


def validate_config_command(args) -> int:
    """Execute validate-config command."""
    logger = LiveLogger(verbose=True)

    StatusDisplay.print_header("Configuration Validation")

    try:
        logger.log_action(f"Loading configuration from: {args.config}")
        config = load_config(args.config)
        logger.log_result("Configuration loaded successfully")
    except FileNotFoundError:
        logger.log_error(f"Configuration file not found: {args.config}")
        return 1
    except (yaml.YAMLError, ValueError) as e:
        logger.log_error(f"Failed to validate config: {e}")
        return 1

    logger.log_action("Validating configuration")
    issues = validate_config(config)

    errors = [issue for issue in issues if issue.startswith("ERROR")]
    warnings = [issue for issue in issues if not issue.startswith("ERROR")]

    if args.strict and warnings:
        errors.extend(warnings)
        warnings = []

    if errors:
        StatusDisplay.print_section("❌ Configuration Errors")
        for i, error in enumerate(errors, 1):
            logger.log_error(f"{i}. {error.replace('ERROR: ', '')}")
        StatusDisplay.print_results({
            "Status": "❌ FAILED",
            "Errors Found": len(errors),
            "Warnings Found": len(warnings),
        }, "Validation Summary")
        return 1

    if warnings:
        StatusDisplay.print_section("⚠️  Configuration Warnings")
        for i, warning in enumerate(warnings, 1):
            logger.log_warning(f"{i}. {warning.replace('WARNING: ', '')}")
        StatusDisplay.print_results({
            "Status": "✓ VALID (with warnings)",
            "Warnings Found": len(warnings),
        }, "Validation Summary")
        return 0

    StatusDisplay.print_results({
        "Status": "✅ VALID",
        "Errors Found": 0,
        "Warnings Found": 0,
    }, "Validation Summary")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    load_dotenv()
    parser = create_parser()
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        parser.print_help()
        return 1

    args = parser.parse_args(argv)

    command_handlers = {
        "generate": generate_command,
        "snap": snap_command,
        "render": render_command,
        "play": play_command,
        "list-templates": list_templates_command,
        "create-config": create_config_command,
        "validate-config": validate_config_command,
    }

    handler = command_handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except KeyboardInterrupt:
        print("\n⚠️  Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())

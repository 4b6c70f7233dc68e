"""CLI entry point for box3-review.

This module acts as the central entry point for the project's CLI tools.
It delegates commands to the appropriate submodules.
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from box3review.config import get_default_specialist, get_default_stage, get_log_level
from box3review.core import get_logger, setup_logging

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


def _read_input(source: str) -> str:
    """Read text from a file path, or stdin when source is '-'."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _write_output(text: str, output: Path | None) -> None:
    if output:
        output.write_text(text, encoding="utf-8")
        logger.info(f"Output saved to {output}")
    else:
        print(text)


# =============================================================================
# Parse Command
# =============================================================================


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle the parse command."""
    from box3review.feedback import FeedbackParser

    try:
        raw_feedback = _read_input(args.input)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read feedback: {e}")
        return 1

    parser = FeedbackParser(specialist=args.specialist, stage_id=args.stage)
    proposals = parser.parse(raw_feedback)
    logger.info(f"Parsed {len(proposals)} proposal(s) for stage {parser.stage_id}")

    result = json.dumps([p.to_dict() for p in proposals], indent=2, ensure_ascii=False)
    _write_output(result, args.output)
    return 0


def handle_parse_command(argv: list[str]) -> int:
    """Handle 'parse' command."""
    parser = argparse.ArgumentParser(
        prog="python . parse",
        description="Parse reviewer feedback into change proposals (JSON)",
    )
    parser.add_argument("input", help="Feedback file, or '-' for stdin")
    parser.add_argument(
        "--specialist",
        "-s",
        default=None,
        help=f"Reviewer label (default: {get_default_specialist()})",
    )
    parser.add_argument(
        "--stage",
        default=None,
        help=f"Stage id used as proposal id prefix (default: {get_default_stage()})",
    )
    parser.add_argument("--output", "-o", type=Path, help="Write JSON to file")

    args = parser.parse_args(argv)
    return cmd_parse(args)


# =============================================================================
# Serialize Command
# =============================================================================


def cmd_serialize(args: argparse.Namespace) -> int:
    """Handle the serialize command."""
    from box3review.mcp.tools import serialize_decisions

    try:
        proposals = json.loads(_read_input(args.input))
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read proposals: {e}")
        return 1
    except json.JSONDecodeError as e:
        logger.error(f"Proposals file is not valid JSON: {e}")
        return 1

    if not isinstance(proposals, list):
        logger.error("Proposals file must contain a JSON list")
        return 1

    try:
        result = serialize_decisions(proposals, format=args.format)
    except ValueError as e:
        logger.error(str(e))
        return 1

    counts = result["counts"]
    logger.info(
        f"Decisions: {counts['accept']} accepted, {counts['modify']} modified, "
        f"{counts['reject']} rejected, {counts['pending']} pending"
    )
    _write_output(result["output"], args.output)
    return 0


def handle_serialize_command(argv: list[str]) -> int:
    """Handle 'serialize' command."""
    parser = argparse.ArgumentParser(
        prog="python . serialize",
        description="Render reviewed proposals for the apply-changes step",
    )
    parser.add_argument("input", help="Proposals JSON file, or '-' for stdin")
    parser.add_argument(
        "--format",
        "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument("--output", "-o", type=Path, help="Write output to file")

    args = parser.parse_args(argv)
    return cmd_serialize(args)


# =============================================================================
# Summarize Command
# =============================================================================


def cmd_summarize(args: argparse.Namespace) -> int:
    """Handle the summarize command."""
    from box3review.summary import summarize_feedback

    try:
        raw_feedback = _read_input(args.input)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read feedback: {e}")
        return 1

    summary = summarize_feedback(args.stage, raw_feedback)
    _write_output(summary.model_dump_json(by_alias=True, indent=2), args.output)
    return 0


def handle_summarize_command(argv: list[str]) -> int:
    """Handle 'summarize' command."""
    parser = argparse.ArgumentParser(
        prog="python . summarize",
        description="Summarize a reviewer stage's feedback",
    )
    parser.add_argument("input", help="Feedback file, or '-' for stdin")
    parser.add_argument("--stage", required=True, help="Stage id")
    parser.add_argument("--output", "-o", type=Path, help="Write JSON to file")

    args = parser.parse_args(argv)
    return cmd_summarize(args)


# =============================================================================
# Stages Command
# =============================================================================


def cmd_stages(_argv: list[str]) -> int:
    """List known workflow stages."""
    from box3review.stages import STAGE_NAMES, is_review_stage

    print("Workflow stages:")
    for stage_id, name in STAGE_NAMES.items():
        marker = " (review)" if is_review_stage(stage_id) else ""
        print(f"  {stage_id:<32} {name}{marker}")
    return 0


# =============================================================================
# MCP Command
# =============================================================================


def handle_mcp_command(argv: list[str]) -> int:
    """Handle MCP server commands.

    Usage:
        python . mcp run              # Start in STDIO mode
        python . mcp serve            # Start in HTTP mode
        python . mcp serve --port 8080
    """
    if not argv:
        print("MCP Server Commands")
        print("\nUsage: python . mcp {command} [options]")
        print("\nCommands:")
        print("  run                 Start server in STDIO mode")
        print("  serve               Start server in HTTP mode")
        print("\nOptions for 'serve':")
        print("  --host HOST         Bind address (default: MCP_HOST or 0.0.0.0)")
        print("  --port PORT         Port number (default: MCP_PORT or 18080)")
        print("  --transport TYPE    Transport: http or sse (default: http)")
        return 1

    from box3review.mcp import ServerConfig, TransportType, run_server

    subcommand = argv[0]

    if subcommand == "run":
        logger.info("Starting MCP server in STDIO mode...")
        run_server(ServerConfig.from_env(transport=TransportType.STDIO))
        return 0

    if subcommand == "serve":
        config = ServerConfig.from_env(transport=TransportType.HTTP)

        parser = argparse.ArgumentParser(prog="python . mcp serve")
        parser.add_argument("--host", default=config.host)
        parser.add_argument("--port", type=int, default=config.port)
        parser.add_argument(
            "--transport", choices=["http", "sse"], default=config.transport.value
        )
        args = parser.parse_args(argv[1:])

        config.transport = TransportType(args.transport)
        config.host = args.host
        config.port = args.port
        logger.info(f"Starting MCP server in {config.transport.value} mode...")
        run_server(config)
        return 0

    logger.error(f"Unknown mcp command: {subcommand}")
    return handle_mcp_command([])


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\nCommands:")
    print("  parse       Parse reviewer feedback into change proposals")
    print("  serialize   Render reviewed proposals (text or JSON)")
    print("  summarize   Summarize a stage's feedback")
    print("  stages      List workflow stages")
    print("  mcp         Run the MCP server")
    print("\nExamples:")
    print("  python . parse feedback.txt --stage 4a_BronnenSpecialist -o proposals.json")
    print("  python . serialize proposals.json --format json")
    print("  python . summarize feedback.txt --stage 4c_ScenarioGatenAnalist")
    print("  python . mcp run")


def main() -> int:
    """Main entry point for the CLI."""
    if len(sys.argv) < 2:
        show_help()
        return 1

    command = sys.argv[1]
    rest_args = sys.argv[2:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    commands = {
        "parse": lambda: handle_parse_command(rest_args),
        "serialize": lambda: handle_serialize_command(rest_args),
        "summarize": lambda: handle_summarize_command(rest_args),
        "stages": lambda: cmd_stages(rest_args),
        "mcp": lambda: handle_mcp_command(rest_args),
    }

    if command in commands:
        setup_logging(level=get_log_level())
        return commands[command]()

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())

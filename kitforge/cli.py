"""kitforge command line.

Usage::

    kitforge serve --port 8000
    kitforge generate selection.yaml --name my-app -o my-app.zip
    kitforge options
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from contextlib import aclosing
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from kitforge.config import Config
from kitforge.errors import Interrupted, KitforgeError
from kitforge.scaffolder import (
    AXIS_LABELS,
    GenerateRequest,
    InterruptRegistry,
    ScaffoldGenerator,
    Selection,
    axis_options,
)
from kitforge.utils import (
    console,
    ensure_dir,
    format_bytes,
    format_duration,
    load_structured,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    run_blocking,
    setup_logging,
)

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


async def generate_archive(
    config: Config,
    selection: Selection,
    project_name: str,
    output: Path,
) -> dict[str, Any]:
    """Run one generation and write the archive to *output*.

    SIGINT/SIGTERM interrupt only this run.  A partial archive is removed
    when the run does not finish.
    """
    interrupts = InterruptRegistry()
    generator = ScaffoldGenerator(config, interrupts=interrupts)
    try:
        remove_handlers = interrupts.install_signal_handlers()
    except NotImplementedError:
        logger.debug("Signal handlers not supported on this platform")
        remove_handlers = None

    started = time.monotonic()
    completed = False
    run = None
    try:
        run = await generator.prepare(selection, project_name)
        ensure_dir(output.parent)
        with output.open("wb") as fh:
            async with aclosing(run.stream()) as chunks:
                async for chunk in chunks:
                    await run_blocking(fh.write, chunk)
        completed = True
    except asyncio.CancelledError:
        # An interrupt that lands while a chunk is being written cancels this
        # task rather than the parked stream.
        if run is None or not run.scope.interrupted:
            raise
        task = asyncio.current_task()
        if task is not None:
            task.uncancel()
        raise Interrupted(f"Run {project_name} was interrupted while writing {output}") from None
    finally:
        if remove_handlers is not None:
            remove_handlers()
        if not completed:
            output.unlink(missing_ok=True)

    return {
        "Project": project_name,
        "Language": selection.lang.value,
        "Dependencies": str(len(run.manifest.dependencies)),
        "Archive": str(output),
        "Size": format_bytes(run.bytes_sent),
        "Duration": format_duration(time.monotonic() - started),
    }


def _read_request(path: Path, name: str | None) -> GenerateRequest:
    data = load_structured(path)
    if name:
        data["app_name"] = name
    return GenerateRequest.model_validate(data)


def cmd_generate(args: argparse.Namespace, config: Config) -> int:
    selection_path = Path(args.selection)
    if not selection_path.exists():
        print_error(f"Selection file not found: {selection_path}")
        return 1

    try:
        request = _read_request(selection_path, args.name)
        project_name = request.project_name
        selection = request.to_selection()
    except (ValueError, ValidationError, KitforgeError) as exc:
        print_error(f"Invalid selection file: {exc}")
        return 1

    output = Path(args.output) if args.output else Path(f"{project_name}.zip")
    try:
        summary = asyncio.run(generate_archive(config, selection, project_name, output))
    except Interrupted as exc:
        print_warning(exc.message)
        return EXIT_INTERRUPTED
    except KitforgeError as exc:
        print_error(f"{exc.code}: {exc.message}")
        return 1

    print_summary_table(summary, title="Generated project")
    print_success(f"Wrote {output}")
    return 0


# ---------------------------------------------------------------------------
# options / serve
# ---------------------------------------------------------------------------


def cmd_options(args: argparse.Namespace, config: Config) -> int:
    options = axis_options()
    print_summary_table(
        {AXIS_LABELS[field]: ", ".join(values) for field, values in options.items()},
        title="Selection axes",
    )
    console.print("Legacy tokens tanstack-qwery, Styled-components and React-router are also accepted.")
    return 0


def cmd_serve(args: argparse.Namespace, config: Config) -> int:
    import uvicorn

    from kitforge.api import create_app

    uvicorn.run(
        create_app(config),
        host=args.host or config.host,
        port=args.port or config.port,
        log_level=config.log_level.lower(),
    )
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kitforge",
        description="kitforge -- React project scaffolding",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  kitforge serve --port 8000\n"
            "  kitforge generate selection.yaml --name my-app\n"
            "  kitforge options\n"
        ),
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: KITFORGE_LOG_LEVEL or INFO)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind address")
    serve.add_argument("--port", type=int, default=None, help="Bind port")
    serve.set_defaults(handler=cmd_serve)

    generate = sub.add_parser("generate", help="Generate a project archive locally")
    generate.add_argument("selection", help="JSON or YAML file with app_name and axis values")
    generate.add_argument("--name", default=None, help="Project name (overrides app_name)")
    generate.add_argument("--output", "-o", default=None, help="Archive path (default: <name>.zip)")
    generate.set_defaults(handler=cmd_generate)

    options = sub.add_parser("options", help="List every axis and its options")
    options.set_defaults(handler=cmd_options)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``kitforge`` and ``python -m kitforge``."""
    args = build_parser().parse_args(argv)
    config = Config.from_env()
    if args.log_level:
        config.log_level = args.log_level.upper()
    setup_logging(config.log_level)
    return args.handler(args, config)


if __name__ == "__main__":
    sys.exit(main())

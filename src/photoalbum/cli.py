#!/usr/bin/env python3
"""
PHOTOALBUM CLI
A digital photo album: takes a set of photos, resizes, orients and captions
them to the user's liking, and writes them with an index.html album to the
output directory.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import TRANSFORM_BACKENDS, load_app_config
from .engine import StatsTracker, album_workflow
from .scheduler import BatchError
from .transforms import get_tool
from .validation import ValidationError, validate_arguments


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photoalbum",
        description="Build a captioned HTML photo album from image files.",
    )
    parser.add_argument("images", nargs="+", metavar="IMAGE", help="JPEG, PNG, BMP or GIF files, in album order")
    parser.add_argument("-o", "--output-dir", type=Path, help="Where derived images and the album are written")
    parser.add_argument("-j", "--max-workers", type=int, help="Maximum images processed at once")
    parser.add_argument("--backend", choices=TRANSFORM_BACKENDS, help="Image transform backend")
    parser.add_argument("-v", "--verbose", action="store_true", default=None, help="Print every pipeline step")
    parser.add_argument("--trace-waits", action="store_true", default=None, help="Print report-token and display-gate traffic")
    return parser


def render_summary(console: Console, summary: dict, tracker: StatsTracker) -> None:
    stats = tracker.snapshot()
    table = Table(title="Album Summary", show_header=False)
    table.add_column("Stat", style="bold")
    table.add_column("Value")
    table.add_row("Images", str(summary['total_images']))
    table.add_row("Added", f"[green]{stats['completed']}[/green]")
    table.add_row("Rotated", str(stats['rotated']))
    table.add_row("Failed", f"[red]{stats['failed']}[/red]" if stats['failed'] else "0")
    table.add_row("Album", escape(str(summary['report_path'])))
    table.add_row("Time", str(stats['time']))
    console.print(table)


def main(argv: Optional[Sequence[str]] = None, console: Optional[Console] = None) -> int:
    args = build_parser().parse_args(argv)
    console = console or Console(highlight=False)

    app_config = load_app_config()
    if args.output_dir is not None:
        app_config['output_dir'] = args.output_dir
    if args.max_workers is not None:
        app_config['max_workers'] = args.max_workers
    if args.backend is not None:
        app_config['transform_backend'] = args.backend
    if args.verbose is not None:
        app_config['verbose'] = args.verbose
    if args.trace_waits is not None:
        app_config['trace_waits'] = args.trace_waits

    if app_config['max_workers'] < 1:
        console.print("[bold red]✗ Error:[/bold red] --max-workers must be at least 1")
        return 1

    try:
        image_paths = validate_arguments(args.images)
    except ValidationError as e:
        console.print(f"[bold red]✗ Error:[/bold red] one (or more) img is {escape(str(e))}")
        return 1

    def log(message: str) -> None:
        console.print(message)

    def no_op(message: str) -> None:
        pass

    def ask(prompt: str) -> str:
        return console.input(f"{escape(prompt)} ")

    verbose = app_config['verbose']
    debug = log if verbose else no_op
    trace = log if (verbose or app_config['trace_waits']) else no_op

    tracker = StatsTracker(log_callback=log)
    try:
        tool = get_tool(app_config, confirm=ask)
        summary = album_workflow(
            image_paths,
            log_callback=log,
            app_config=app_config,
            tool=tool,
            input_func=ask,
            tracker=tracker,
            debug_callback=debug,
            trace_callback=trace
        )
    except (BatchError, ValueError) as e:
        console.print(f"[bold red]✗ FATAL:[/bold red] {escape(str(e))}")
        return 1

    console.print()
    render_summary(console, summary, tracker)
    return 0 if summary['failed'] == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())

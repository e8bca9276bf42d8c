#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PHOTOALBUM Engine
High-level workflow orchestration for building a captioned photo album.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional, Dict, Any, Callable, Sequence

from rich.markup import escape

from .config import load_app_config
from .models import build_items
from .pipeline import PipelineContext, run_item
from .report import AlbumReport
from .scheduler import BatchError, BatchResult, run_batch
from .sequencer import DisplayGate, OutputSequencer, no_op_logger
from .transforms import TransformTool, get_tool

# ==============================================================================
# STATS TRACKER
# ==============================================================================

class StatsTracker:
    """
    Real-time statistics tracker for workflow progress.
    Thread-safe: every worker updates the same tracker.

    Usage:
        tracker = StatsTracker(callback=my_callback_function)
        tracker.start_timer()
        tracker.increment('completed')
        tracker.stop_timer()
    """

    def __init__(self, callback: Optional[Callable[[str, Any], None]] = None,
                 log_callback: Callable[[str], None] = no_op_logger):
        """
        Args:
            callback: Function to call when stats update (receives key, value)
            log_callback: Where callback failures are reported
        """
        self.callback = callback
        self.log = log_callback
        self._lock = threading.Lock()
        self._stats: Dict[str, Any] = {
            'completed': 0,
            'failed': 0,
            'rotated': 0,
            'time': '--'
        }
        self._start_time: Optional[datetime] = None

    def update(self, key: str, value: Any) -> None:
        """
        Update a stat and trigger callback.

        Args:
            key: Stat identifier (e.g., 'completed', 'failed', 'rotated')
            value: New value for the stat
        """
        with self._lock:
            self._stats[key] = value
        self._notify(key, value)

    def increment(self, key: str) -> None:
        with self._lock:
            self._stats[key] += 1
            value = self._stats[key]
        self._notify(key, value)

    def _notify(self, key: str, value: Any) -> None:
        if not self.callback:
            return
        try:
            self.callback(key, value)
        except Exception as e:
            # Display only; never fail a worker over it
            self.log(f"   [yellow]⚠️[/yellow] Stats callback failed: {e}")

    def get(self, key: str) -> Any:
        with self._lock:
            return self._stats[key]

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._stats)

    def start_timer(self) -> None:
        """Start the workflow timer."""
        self._start_time = datetime.now()
        self.update('time', 'Running...')

    def stop_timer(self) -> None:
        """Stop the timer and record a human-readable duration."""
        if self._start_time:
            self.update('time', format_duration(datetime.now() - self._start_time))


# ==============================================================================
# CORE UTILITIES
# ==============================================================================

def format_duration(duration: timedelta) -> str:
    """Converts timedelta to readable string like '2m 34s'"""
    total_seconds = int(duration.total_seconds())
    minutes, seconds = divmod(total_seconds, 60)
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


# ==============================================================================
# ALBUM WORKFLOW
# ==============================================================================

def album_workflow(
    image_paths: Sequence[Path],
    log_callback: Callable[[str], None] = no_op_logger,
    app_config: Optional[Dict[str, Any]] = None,
    tool: Optional[TransformTool] = None,
    input_func: Callable[[str], str] = input,
    tracker: Optional[StatsTracker] = None,
    debug_callback: Callable[[str], None] = no_op_logger,
    trace_callback: Callable[[str], None] = no_op_logger
) -> Dict[str, Any]:
    """
    Build the album: thumbnail + medium per image, user rotation and caption,
    and index.html entries in input order.

    Args:
        image_paths: Validated image paths, in album order
        log_callback: User-facing messages (rich markup)
        app_config: Settings (defaults to load_app_config())
        tool: Transform backend (defaults to get_tool(app_config))
        input_func: Prompts the user and returns one line of input
        tracker: Optional stats tracker
        debug_callback: Step-by-step tracing
        trace_callback: Token and gate wait tracing

    Returns:
        Summary dict with counts, report path, duration and the BatchResult

    Raises:
        BatchError: If the output location or coordination state cannot be set up
    """
    if app_config is None:
        app_config = load_app_config()

    start_time = datetime.now()
    output_dir = Path(app_config.get('output_dir', '.'))

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        if tool is None:
            tool = get_tool(app_config, confirm=input_func)
        items = build_items(image_paths, output_dir)
        context = PipelineContext(
            tool=tool,
            sequencer=OutputSequencer(
                poll_interval=app_config['poll_interval'],
                trace_callback=trace_callback
            ),
            gate=DisplayGate(log_callback=log_callback, trace_callback=trace_callback),
            report=AlbumReport(output_dir, app_config['report_name'], debug_callback=debug_callback),
            input_func=input_func,
            thumbnail_percent=app_config['thumbnail_percent'],
            medium_percent=app_config['medium_percent'],
            caption_max_length=app_config['caption_max_length'],
            log_callback=log_callback,
            debug_callback=debug_callback,
            tracker=tracker
        )
    except (OSError, KeyError, ValueError) as e:
        raise BatchError(f"could not set up the album pipeline: {e}") from e

    log_callback("Image Processing will begin now...\n")
    log_callback(f"   Images:      {len(items)}")
    log_callback(f"   Output:      {escape(str(output_dir))}")
    log_callback(f"   Workers:     {app_config['max_workers']}")

    if tracker:
        tracker.start_timer()

    def on_failure(item, error):
        if tracker:
            tracker.increment('failed')

    result: BatchResult = run_batch(
        items,
        lambda item: run_item(item, context),
        cap=app_config['max_workers'],
        poll_interval=app_config['poll_interval'],
        log_callback=log_callback,
        debug_callback=debug_callback,
        on_failure=on_failure
    )

    if tracker:
        tracker.stop_timer()

    duration = datetime.now() - start_time
    log_callback("\n=============== END OF PHOTO CONVERSION ===============")
    if result.ok:
        log_callback("[bold green]✓ Digital Photo Album is Complete![/bold green]")
    else:
        log_callback(f"[bold yellow]⚠️  Album finished with {len(result.failed)} failed image(s).[/bold yellow]")
    log_callback(f"'{escape(context.report.path.name)}' album and all edited images are in {escape(str(output_dir))}")

    return {
        'total_images': len(items),
        'completed': len(result.completed),
        'failed': len(result.failed),
        'report_path': context.report.path,
        'duration': format_duration(duration),
        'result': result,
    }

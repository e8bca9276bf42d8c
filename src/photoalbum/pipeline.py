#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PHOTOALBUM Item Pipeline
One worker's path through a single image:

    DERIVING -> GATED_FOR_DISPLAY -> DISPLAYING -> INTERACTING
      -> CONDITIONALLY_TRANSFORMING -> REPORTING -> DONE

Both variants are always derived; rotation only happens when asked for.
Display order follows the DisplayGate, report order follows the
OutputSequencer. Any failure is fatal to this worker only.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, List, Optional

from rich.markup import escape

from .config import THUMBNAIL_PERCENT, MEDIUM_PERCENT, CAPTION_MAX_LENGTH
from .models import Item, Rotation
from .report import AlbumReport
from .sequencer import DisplayGate, OutputSequencer, no_op_logger
from .session import InteractiveSession
from .transforms import TransformTool

if TYPE_CHECKING:
    from .engine import StatsTracker


class PipelineState(Enum):
    DERIVING = "deriving"
    GATED_FOR_DISPLAY = "gated_for_display"
    DISPLAYING = "displaying"
    INTERACTING = "interacting"
    CONDITIONALLY_TRANSFORMING = "conditionally_transforming"
    REPORTING = "reporting"
    DONE = "done"


class PipelineError(RuntimeError):
    """A worker failed; carries the item and the state it failed in."""

    def __init__(self, item: Item, state: PipelineState, cause: BaseException):
        super().__init__(f"{item.name} (#{item.index}) failed while {state.value}: {cause}")
        self.item = item
        self.state = state
        self.cause = cause


@dataclass
class PipelineContext:
    """Everything the workers of one batch share."""

    tool: TransformTool
    sequencer: OutputSequencer
    gate: DisplayGate
    report: AlbumReport
    input_func: Callable[[str], str] = input
    thumbnail_percent: int = THUMBNAIL_PERCENT
    medium_percent: int = MEDIUM_PERCENT
    caption_max_length: int = CAPTION_MAX_LENGTH
    log_callback: Callable[[str], None] = no_op_logger
    debug_callback: Callable[[str], None] = no_op_logger
    tracker: Optional["StatsTracker"] = None
    state_callback: Optional[Callable[[Item, PipelineState], None]] = field(default=None, repr=False)


class ItemPipeline:
    """
    Runs one item to completion.

    Usage:
        ItemPipeline(item, context).run()
    """

    def __init__(self, item: Item, context: PipelineContext):
        self.item = item
        self.ctx = context
        self.state = PipelineState.DERIVING
        self.log = context.log_callback
        self.debug = context.debug_callback

    def _enter(self, state: PipelineState) -> None:
        self.state = state
        self.debug(f"   [dim]{self.item.index} → {state.value}[/dim]")
        if self.ctx.state_callback:
            self.ctx.state_callback(self.item, state)

    def run(self) -> Item:
        """
        Returns:
            The finished item

        Raises:
            PipelineError: On any failure, wrapping the original exception
        """
        try:
            self._run()
        except Exception as e:
            self.log(f"   [red]✗ {escape(self.item.name)} failed while {self.state.value}:[/red] {escape(str(e))}")
            self.log(f"   [yellow]⚠️[/yellow] Images after #{self.item.index} will wait for it indefinitely")
            raise PipelineError(self.item, self.state, e) from e
        return self.item

    def _run(self) -> None:
        item = self.item
        ctx = self.ctx

        # --- DERIVING ---
        self._enter(PipelineState.DERIVING)
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix=f"derive-{item.index}") as executor:
            self.debug(f"   [dim]{item.index} resizing {escape(item.name)} by {ctx.thumbnail_percent}% and {ctx.medium_percent}%[/dim]")
            thumb_future = executor.submit(ctx.tool.derive, item.source, item.thumbnail, ctx.thumbnail_percent)
            medium_future = executor.submit(ctx.tool.derive, item.source, item.medium, ctx.medium_percent)
            thumb_future.result()

            # --- GATED_FOR_DISPLAY ---
            self._enter(PipelineState.GATED_FOR_DISPLAY)
            ctx.gate.wait(item.index)

            # --- DISPLAYING ---
            self._enter(PipelineState.DISPLAYING)
            self.log(f"=============== {escape(str(item.source))} ===============")
            self.log("Please close the image to continue!")
            ctx.tool.display(item.thumbnail)

            with InteractiveSession(
                ctx.input_func,
                caption_max_length=ctx.caption_max_length,
                log_callback=self.log,
                name=f"#{item.index} {item.name}"
            ) as session:
                # --- INTERACTING ---
                self._enter(PipelineState.INTERACTING)
                item.rotation = session.ask_rotation()
                self.debug(f"   [dim]{item.index} captured rotation {item.rotation.name}[/dim]")

                # --- CONDITIONALLY_TRANSFORMING ---
                self._enter(PipelineState.CONDITIONALLY_TRANSFORMING)
                medium_future.result()
                if item.rotation is not Rotation.NONE:
                    self._rotate(executor)

                # caption is asked back in INTERACTING
                self._enter(PipelineState.INTERACTING)
                item.caption = session.ask_caption()

        # --- REPORTING ---
        self._enter(PipelineState.REPORTING)
        with ctx.sequencer.turn(item.index):
            ctx.report.write_link_block(item.thumbnail, item.medium, item.index)
            ctx.report.write_caption_block(item.caption)
        ctx.gate.signal(item.index)

        self._enter(PipelineState.DONE)
        if ctx.tracker:
            ctx.tracker.increment('completed')
            if item.rotation is not Rotation.NONE:
                ctx.tracker.increment('rotated')
        self.log(f"   [green]✓[/green] #{item.index} {escape(item.name)} added to the album")

    def _rotate(self, executor: ThreadPoolExecutor) -> None:
        item = self.item
        self.debug(f"   [dim]{item.index} rotating thumbnail and medium {item.rotation.name}[/dim]")
        futures: List[Future] = [
            executor.submit(self.ctx.tool.rotate, item.thumbnail, item.rotation),
            executor.submit(self.ctx.tool.rotate, item.medium, item.rotation),
        ]
        for future in futures:
            future.result()


def run_item(item: Item, context: PipelineContext) -> Item:
    """Thread-pool worker: process a single item."""
    return ItemPipeline(item, context).run()

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PHOTOALBUM Scheduler
Bounded worker pool and batch reaping.

Workers are spawned strictly in sequence-index order. Before each spawn the
scheduler polls the active count and sleeps while the cap is reached.
Execution order is then up to the workers. The batch ends only when every
worker has terminated.
"""

from __future__ import annotations

import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, List, Optional, Sequence

from rich.markup import escape

from .config import MAX_WORKERS, POLL_INTERVAL
from .models import Item
from .pipeline import PipelineError
from .sequencer import no_op_logger


class BatchError(RuntimeError):
    """Raised when the shared pipeline infrastructure cannot be set up."""


# ==============================================================================
# WORKER POOL
# ==============================================================================

class WorkerPool:
    """
    At most `cap` workers are active at any time.

    Each spawn returns the worker's Future, which is its handle: done() for
    liveness, exception() for a fatal error.
    """

    def __init__(
        self,
        cap: int = MAX_WORKERS,
        poll_interval: float = POLL_INTERVAL,
        debug_callback: Callable[[str], None] = no_op_logger
    ):
        if cap < 1:
            raise ValueError(f"worker cap must be at least 1, got {cap}")
        self.cap = cap
        self.poll_interval = poll_interval
        self.debug = debug_callback
        self.handles: List[Future] = []
        self._executor = ThreadPoolExecutor(max_workers=cap, thread_name_prefix="album-worker")

    def active_count(self) -> int:
        """Number of spawned workers that have not terminated."""
        return sum(1 for handle in self.handles if not handle.done())

    def spawn(self, fn: Callable[..., Any], *args: Any) -> Future:
        """Wait for a free slot, then start fn(*args) on a worker thread."""
        while self.active_count() >= self.cap:
            time.sleep(self.poll_interval)
        handle = self._executor.submit(fn, *args)
        self.handles.append(handle)
        self.debug(f"   [dim]spawned worker {len(self.handles)} ({self.active_count()}/{self.cap} active)[/dim]")
        return handle

    def join(self) -> None:
        """Block until every spawned worker has terminated."""
        wait(self.handles)
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.join()


# ==============================================================================
# BATCH
# ==============================================================================

@dataclass
class WorkerOutcome:
    item: Item
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    outcomes: List[WorkerOutcome] = field(default_factory=list)

    @property
    def completed(self) -> List[Item]:
        return [o.item for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> List[WorkerOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def ok(self) -> bool:
        return not self.failed


def run_batch(
    items: Sequence[Item],
    worker: Callable[[Item], Any],
    cap: int = MAX_WORKERS,
    poll_interval: float = POLL_INTERVAL,
    log_callback: Callable[[str], None] = no_op_logger,
    debug_callback: Callable[[str], None] = no_op_logger,
    on_failure: Optional[Callable[[Item, BaseException], None]] = None
) -> BatchResult:
    """
    Spawn one worker per item (in order), capped, and wait for all of them.

    A failure is reported as soon as its worker terminates. A failed item
    can stall its successors, so the join may never be reached.

    Args:
        items: Items in sequence-index order
        worker: Called as worker(item) on a pool thread
        cap: Maximum simultaneously active workers
        poll_interval: Admission-control sleep while the pool is full
        log_callback: Failure messages for errors the worker did not report itself
        debug_callback: Spawn tracing
        on_failure: Called once per failed worker, from the failing worker's thread

    Returns:
        BatchResult with one outcome per item, in input order
    """
    def report_failure(item: Item, handle: Future) -> None:
        error = handle.exception()
        if error is None:
            return
        if isinstance(error, PipelineError):
            debug_callback(f"   [dim]worker for #{item.index} exited: {escape(str(error))}[/dim]")
        else:
            log_callback(f"   [red]✗ #{item.index} {escape(item.name)}:[/red] {escape(str(error))}")
        if on_failure:
            on_failure(item, error)

    result = BatchResult()
    with WorkerPool(cap, poll_interval, debug_callback) as pool:
        for item in items:
            debug_callback(f"   [dim]begin process on {escape(str(item.source))}[/dim]")
            handle = pool.spawn(worker, item)
            handle.add_done_callback(partial(report_failure, item))

    for item, handle in zip(items, pool.handles):
        result.outcomes.append(WorkerOutcome(item, handle.exception()))
    return result

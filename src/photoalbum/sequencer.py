#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PHOTOALBUM Sequencer
Cross-worker ordering signals.

Two independent orderings keep concurrent workers in input order:

- OutputSequencer: a token ring deciding whose turn it is to append to the
  album report. Exactly one token circulates on a shared channel. A worker
  that receives somebody else's token puts it straight back.
- DisplayGate: one-shot signals from item i-1 to item i, so the thumbnails
  are shown to the user in input order.
"""

from __future__ import annotations

import queue
import threading
import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterator

from .config import POLL_INTERVAL


def no_op_logger(message: str) -> None:
    """A dummy logger that does nothing, for when no callback is provided."""
    pass


class ChannelError(RuntimeError):
    """Raised when a coordination signal cannot be sent or received."""


# ==============================================================================
# OUTPUT SEQUENCER (TOKEN RING)
# ==============================================================================

class OutputSequencer:
    """
    Strict turn-taking for report writes.

    Usage:
        sequencer = OutputSequencer()
        with sequencer.turn(item.index):
            report.write_link_block(...)
            report.write_caption_block(...)
    """

    def __init__(
        self,
        first_index: int = 1,
        poll_interval: float = POLL_INTERVAL,
        trace_callback: Callable[[str], None] = no_op_logger
    ):
        """
        Args:
            first_index: The seeded token holder; it never waits
            poll_interval: Seconds to step aside after forwarding a token
            trace_callback: Receives token traffic messages
        """
        self.first_index = first_index
        self.poll_interval = poll_interval
        self.trace = trace_callback
        self._channel: "queue.Queue[int]" = queue.Queue()

    def acquire(self, index: int) -> None:
        """Block until the token value equals index."""
        if index == self.first_index:
            return

        while True:
            token = self._channel.get()
            self.trace(f"   [dim]{index} received {token}[/dim]")

            if token == index:
                return

            # Not mine: forward unchanged and step aside
            self._channel.put(token)
            self.trace(f"   [dim]{index} resending {token}[/dim]")
            time.sleep(self.poll_interval)

    def release(self, index: int) -> None:
        """Hand the turn to index + 1. The last item's token is never consumed."""
        self.trace(f"   [dim]{index} sending {index + 1}[/dim]")
        self._channel.put(index + 1)

    @contextmanager
    def turn(self, index: int) -> Iterator[None]:
        """
        Hold the turn for the duration of the block.

        The turn is released only if the block completes. A failed writer
        keeps the token, and every later item waits for it indefinitely.
        """
        self.acquire(index)
        yield
        self.release(index)


# ==============================================================================
# DISPLAY GATE
# ==============================================================================

class DisplayGate:
    """
    Per-predecessor one-shot notifications.

    Item 1 has no gate. Item i waits for signal(i - 1).
    """

    def __init__(
        self,
        log_callback: Callable[[str], None] = no_op_logger,
        trace_callback: Callable[[str], None] = no_op_logger
    ):
        self.log = log_callback
        self.trace = trace_callback
        self._signals: Dict[int, threading.Event] = {}
        self._lock = threading.Lock()

    def _event(self, index: int) -> threading.Event:
        with self._lock:
            event = self._signals.get(index)
            if event is None:
                event = self._signals[index] = threading.Event()
            return event

    def wait(self, index: int) -> None:
        """Block until the predecessor of index has signalled."""
        if self.is_open(index):
            self.trace(f"   [dim]{index} may display without waiting[/dim]")
            return
        self.trace(f"   [dim]{index} waiting to display until {index - 1} is finished[/dim]")
        self._event(index - 1).wait()
        self.trace(f"   [dim]{index} done waiting on {index - 1}[/dim]")

    def signal(self, index: int) -> None:
        """Tell item index + 1 that it may display."""
        event = self._event(index)
        if event.is_set():
            self.log(f"   [yellow]⚠️[/yellow] Gate signal from item {index} was already sent")
            return
        self.trace(f"   [dim]{index} signalling {index + 1} to display[/dim]")
        event.set()

    def is_open(self, index: int) -> bool:
        """True if item index may display without waiting."""
        return index <= 1 or self._event(index - 1).is_set()

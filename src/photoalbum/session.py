#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PHOTOALBUM Interactive Session
The two-question dialogue (rotation, then caption) for one image.

A helper thread owns the actual input collection. The pipeline decides when
each question is asked: rotation right after the thumbnail is closed, the
caption only after any rotation has been applied.
"""

from __future__ import annotations

import queue
import threading
from typing import Callable, Optional, Union

from rich.markup import escape

from .config import CAPTION_MAX_LENGTH
from .models import Rotation
from .sequencer import ChannelError, no_op_logger

ROTATION_PROMPT = "Rotate the photo clockwise(1), counter-clockwise(2), or not rotate at all(3)?"
CAPTION_PROMPT = "What's the caption for this photo?"

_PROMPTS = (ROTATION_PROMPT, CAPTION_PROMPT)
_STOP = None


class InteractiveSession:
    """
    Usage:
        with InteractiveSession(input_func) as session:
            rotation = session.ask_rotation()
            ...
            caption = session.ask_caption()
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        caption_max_length: int = CAPTION_MAX_LENGTH,
        log_callback: Callable[[str], None] = no_op_logger,
        name: str = "session"
    ):
        self.input_func = input_func
        self.caption_max_length = caption_max_length
        self.log = log_callback
        self.name = name
        self._requests: "queue.Queue[Optional[str]]" = queue.Queue()
        self._responses: "queue.Queue[Union[str, BaseException]]" = queue.Queue()
        self._asked = 0
        self._thread = threading.Thread(target=self._serve, name=f"{name}-input", daemon=True)
        self._thread.start()

    # --- helper side ---

    def _serve(self) -> None:
        for _ in _PROMPTS:
            prompt = self._requests.get()
            if prompt is _STOP:
                return
            try:
                answer = self.input_func(prompt)
            except EOFError:
                self.log(f"   [yellow]⚠️[/yellow] No input for {escape(self.name)}; using an empty answer")
                answer = ""
            except Exception as e:
                self._responses.put(e)
                return
            if len(answer) > self.caption_max_length:
                self.log(
                    f"   [yellow]⚠️[/yellow] Answer for {escape(self.name)} is longer than "
                    f"{self.caption_max_length} characters; the rest was dropped"
                )
                answer = answer[:self.caption_max_length]
            self._responses.put(answer)

    # --- caller side ---

    def _round_trip(self) -> str:
        if self._asked >= len(_PROMPTS):
            raise ChannelError(f"{self.name}: both questions have already been asked")
        prompt = _PROMPTS[self._asked]
        self._asked += 1
        self._requests.put(prompt)
        response = self._responses.get()
        if isinstance(response, BaseException):
            raise ChannelError(f"{self.name}: input failed: {response}") from response
        return response

    def ask_rotation(self) -> Rotation:
        """Ask the first question. Unrecognized answers mean no rotation."""
        return Rotation.from_response(self._round_trip())

    def ask_caption(self) -> str:
        """Ask the second question. The caption is kept verbatim, only truncated."""
        caption = self._round_trip()
        self.close()
        return caption

    def close(self) -> None:
        """Join the helper, releasing it first if a question was never asked."""
        if self._asked < len(_PROMPTS) and self._thread.is_alive():
            self._requests.put(_STOP)
            self._asked = len(_PROMPTS)
        self._thread.join()

    def __enter__(self) -> "InteractiveSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

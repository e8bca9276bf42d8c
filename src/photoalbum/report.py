#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PHOTOALBUM Report
Append-only HTML album: per image a link block, then a caption block.

Writers must hold the OutputSequencer turn. The first item's link block
overwrites any album left by a previous run.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

from rich.markup import escape

from .config import REPORT_FILENAME
from .sequencer import no_op_logger


class AlbumReport:
    """The index.html sink shared by all workers."""

    def __init__(
        self,
        output_dir: Path,
        filename: str = REPORT_FILENAME,
        debug_callback: Callable[[str], None] = no_op_logger
    ):
        self.output_dir = Path(output_dir)
        self.path = self.output_dir / filename
        self.debug = debug_callback

    def _href(self, artifact: Path) -> str:
        return Path(os.path.relpath(artifact, self.output_dir)).as_posix()

    def _write(self, text: str, mode: str) -> None:
        with open(self.path, mode, encoding="utf-8") as f:
            f.write(text)

    def write_link_block(self, thumbnail: Path, medium: Path, index: int) -> None:
        """
        Thumbnail image linking to the medium image.

        Args:
            thumbnail: Derived thumbnail path
            medium: Derived medium path
            index: 1-based sequence index; 1 truncates the album
        """
        self.debug(f"   [dim]writing {escape(Path(thumbnail).name)} to {self.path.name}...[/dim]")
        mode = "w" if index == 1 else "a"
        self._write(f'<a href="{self._href(medium)}"><img src="{self._href(thumbnail)}"></a>', mode)

    def write_caption_block(self, caption: str) -> None:
        """Caption heading. Written as given, without escaping."""
        self.debug(f"   [dim]adding caption to {self.path.name}...[/dim]")
        self._write(f"<h2>{caption}</h2>", "a")

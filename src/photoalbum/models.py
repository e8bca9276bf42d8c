#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PHOTOALBUM Models
The per-image work item and the rotation decision.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .config import THUMBNAIL_PREFIX, MEDIUM_PREFIX


class Rotation(Enum):
    """Rotation requested by the user, keyed by the answer token."""

    NONE = 0
    CLOCKWISE = 1
    COUNTER_CLOCKWISE = 2

    @classmethod
    def from_response(cls, response: str) -> "Rotation":
        """'1' is clockwise, '2' counter-clockwise, anything else no rotation."""
        if response == "1":
            return cls.CLOCKWISE
        if response == "2":
            return cls.COUNTER_CLOCKWISE
        return cls.NONE

    @property
    def degrees(self) -> int:
        """Clockwise degrees, as ImageMagick's -rotate expects."""
        return {Rotation.NONE: 0, Rotation.CLOCKWISE: 90, Rotation.COUNTER_CLOCKWISE: -90}[self]


@dataclass
class Item:
    """
    One image flowing through the album pipeline.

    Owned by a single worker. Once its report entry is written the
    worker no longer touches it.
    """

    source: Path
    index: int
    thumbnail: Path
    medium: Path
    caption: str = ""
    rotation: Rotation = Rotation.NONE

    @classmethod
    def from_path(cls, source: Path, index: int, output_dir: Path) -> "Item":
        source = Path(source)
        output_dir = Path(output_dir)
        return cls(
            source=source,
            index=index,
            thumbnail=output_dir / f"{THUMBNAIL_PREFIX}{source.name}",
            medium=output_dir / f"{MEDIUM_PREFIX}{source.name}",
        )

    @property
    def name(self) -> str:
        return self.source.name


def build_items(paths, output_dir: Path):
    """Assign 1-based sequence indices in input order."""
    return [Item.from_path(path, index, output_dir) for index, path in enumerate(paths, 1)]

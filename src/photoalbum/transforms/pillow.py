from __future__ import annotations
from pathlib import Path
from typing import Callable, Optional

from PIL import Image

from ..models import Rotation
from .base import TransformTool, TransformError

DISMISS_PROMPT = "Press Enter once you have closed the image"

# PIL's ROTATE_* constants turn counter-clockwise
_TRANSPOSE = {
    Rotation.CLOCKWISE: Image.Transpose.ROTATE_270,
    Rotation.COUNTER_CLOCKWISE: Image.Transpose.ROTATE_90,
}


class PillowTool(TransformTool):
    """
    In-process transforms using Pillow.

    The system image viewer does not report when it is closed, so display()
    blocks on a confirmation prompt instead.
    """

    def __init__(self, confirm: Optional[Callable[[str], str]] = None):
        self.confirm = confirm or input

    def derive(self, source: Path, destination: Path, percent: int) -> Path:
        try:
            with Image.open(source) as img:
                width = max(1, round(img.width * percent / 100))
                height = max(1, round(img.height * percent / 100))
                resized = img.resize((width, height))
                resized.save(destination, format=img.format)
        except (OSError, ValueError) as e:
            raise TransformError(f"resize of {source} failed: {e}") from e
        return destination

    def rotate(self, artifact: Path, rotation: Rotation) -> Path:
        if rotation is Rotation.NONE:
            return artifact
        try:
            with Image.open(artifact) as img:
                fmt = img.format
                rotated = img.transpose(_TRANSPOSE[rotation])
            rotated.save(artifact, format=fmt)
        except (OSError, ValueError) as e:
            raise TransformError(f"rotate of {artifact} failed: {e}") from e
        return artifact

    def display(self, artifact: Path) -> None:
        try:
            with Image.open(artifact) as img:
                img.show(title=artifact.name)
        except OSError as e:
            raise TransformError(f"display of {artifact} failed: {e}") from e
        self.confirm(DISMISS_PROMPT)

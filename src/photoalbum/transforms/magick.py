from __future__ import annotations
import subprocess
from pathlib import Path
from typing import List

from ..models import Rotation
from .base import TransformTool, TransformError


class MagickTool(TransformTool):
    """
    ImageMagick-backed transforms, one `magick` invocation per operation.
    """

    def __init__(self, binary: str = "magick"):
        self.binary = binary

    def _run(self, args: List[str]) -> None:
        command = [self.binary, *args]
        try:
            subprocess.run(command, capture_output=True, text=True, check=True)
        except FileNotFoundError as e:
            raise TransformError(f"'{self.binary}' not found. Please ensure ImageMagick is in your PATH.") from e
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
            raise TransformError(f"{' '.join(command)} failed: {detail}") from e

    def derive(self, source: Path, destination: Path, percent: int) -> Path:
        self._run(["convert", "-resize", f"{percent}%", str(source), str(destination)])
        return destination

    def rotate(self, artifact: Path, rotation: Rotation) -> Path:
        """
        Rotates in place. Rotation.NONE still runs with 0 degrees.
        """
        self._run(["convert", "-rotate", str(rotation.degrees), str(artifact), str(artifact)])
        return artifact

    def display(self, artifact: Path) -> None:
        """
        Opens `magick display`, which returns when the window is closed.
        """
        self._run(["display", str(artifact)])

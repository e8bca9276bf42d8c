from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path

from ..models import Rotation


class TransformError(RuntimeError):
    """Raised when the external transform tool fails."""


class TransformTool(ABC):
    """
    Abstract base class for image transform backends.
    """

    @abstractmethod
    def derive(self, source: Path, destination: Path, percent: int) -> Path:
        """
        Writes a copy of source scaled to percent of its size.

        Args:
            source: The original image
            destination: Where the derived image is written
            percent: Target size as a percentage of the original

        Returns:
            The destination path.
        """
        pass

    @abstractmethod
    def rotate(self, artifact: Path, rotation: Rotation) -> Path:
        """
        Rotates an image in place, overwriting it.

        Returns:
            The same path.
        """
        pass

    @abstractmethod
    def display(self, artifact: Path) -> None:
        """
        Shows an image and blocks until the user dismisses it.
        """
        pass

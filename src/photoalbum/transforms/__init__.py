from __future__ import annotations
from typing import Any, Callable, Dict, Optional
from .base import TransformTool, TransformError
from .magick import MagickTool
from .pillow import PillowTool

__all__ = ["TransformTool", "TransformError", "MagickTool", "PillowTool", "get_tool"]


def get_tool(config_dict: Dict[str, Any], confirm: Optional[Callable[[str], str]] = None) -> TransformTool:
    """
    Factory function to get the appropriate transform backend based on configuration.
    """
    backend = config_dict.get("transform_backend", "magick").lower()

    if backend == "pillow":
        return PillowTool(confirm=confirm)
    elif backend == "magick":
        return MagickTool(config_dict.get("magick_binary") or "magick")
    raise ValueError(f"Unknown transform backend: {backend!r} (expected 'magick' or 'pillow')")

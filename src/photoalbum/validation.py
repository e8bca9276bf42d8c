#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PHOTOALBUM Validation
Input path checks and image format recognition by file signature.

Runs before any worker is started. A single bad path rejects the whole batch.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence, Tuple


# ==============================================================================
# FILE SIGNATURES
# ==============================================================================

HEADER_LENGTH = 8

IMAGE_SIGNATURES: Tuple[Tuple[str, bytes], ...] = (
    ("jpeg", b"\xff\xd8"),
    ("png", b"\x89PNG\r\n\x1a\n"),
    ("bmp", b"BM"),
    ("gif", b"GIF"),
)


class ValidationError(ValueError):
    """Raised when an input path is missing, unreadable, or not an image."""

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.path = path


def detect_image_format(header: bytes) -> str | None:
    """
    Match the leading bytes of a file against known image signatures.

    Args:
        header: The first HEADER_LENGTH bytes of a file (shorter is allowed)

    Returns:
        Format name ('jpeg', 'png', 'bmp', 'gif'), or None if unrecognized
    """
    for name, signature in IMAGE_SIGNATURES:
        if header[:len(signature)] == signature:
            return name
    return None


def header_is_image(header: bytes) -> bool:
    """True if the leading bytes identify a JPEG, PNG, BMP or GIF file."""
    return detect_image_format(header) is not None


# ==============================================================================
# PATH VALIDATION
# ==============================================================================

def validate_image_path(path: Path | str) -> Path:
    """
    Check that a path is a readable file whose header is an image signature.

    Returns:
        The path as a Path object

    Raises:
        ValidationError: If the path cannot be read or is not an image
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            header = f.read(HEADER_LENGTH)
    except OSError as e:
        raise ValidationError(f"not a valid image or path: {path} ({e.strerror})", path) from e

    if not header_is_image(header):
        raise ValidationError(f"not a valid image or path: {path}", path)

    return path


def validate_arguments(arguments: Sequence[str]) -> List[Path]:
    """
    Validate every image argument, stopping at the first bad one.

    Raises:
        ValidationError: If no arguments were given or any one is invalid
    """
    if not arguments:
        raise ValidationError("at least one image is required")
    return [validate_image_path(arg) for arg in arguments]

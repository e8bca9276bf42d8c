from pathlib import Path

import pytest

from photoalbum.validation import (
    ValidationError,
    detect_image_format,
    header_is_image,
    validate_arguments,
    validate_image_path,
)

from conftest import write_png


@pytest.mark.parametrize(
    "header, expected",
    [
        (b"\xff\xd8\xff\xe0\x00\x10JF", "jpeg"),
        (b"\x89PNG\r\n\x1a\n", "png"),
        (b"BM6\x00\x0c\x00\x00\x00", "bmp"),
        (b"GIF89a\x01\x00", "gif"),
    ],
)
def test_detect_image_format_known_signatures(header, expected):
    assert detect_image_format(header) == expected
    assert header_is_image(header)


@pytest.mark.parametrize(
    "header",
    [
        b"",
        b"hello wo",
        b"\x89PNG\r\n\x1a\x00",  # last byte differs
        b"\x89PNG",  # truncated png signature
        b"\xff\x00\x00\x00\x00\x00\x00\x00",
        b"GI",
    ],
)
def test_header_is_image_rejects_other_bytes(header):
    assert not header_is_image(header)
    assert detect_image_format(header) is None


def test_validate_image_path_accepts_real_png(tmp_path):
    path = write_png(tmp_path / "photo.png")
    assert validate_image_path(str(path)) == path


def test_validate_image_path_rejects_text_file(tmp_path):
    path = tmp_path / "notes.jpg"
    path.write_text("definitely not a picture", encoding="utf-8")

    with pytest.raises(ValidationError, match="not a valid image or path") as excinfo:
        validate_image_path(path)
    assert excinfo.value.path == path


def test_validate_image_path_rejects_missing_file(tmp_path):
    with pytest.raises(ValidationError, match="missing.png"):
        validate_image_path(tmp_path / "missing.png")


def test_validate_arguments_requires_at_least_one():
    with pytest.raises(ValidationError, match="at least one image"):
        validate_arguments([])


def test_validate_arguments_stops_at_first_bad_path(tmp_path):
    good = write_png(tmp_path / "good.png")
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"\x00" * 16)

    with pytest.raises(ValidationError) as excinfo:
        validate_arguments([str(good), str(bad)])
    assert Path(excinfo.value.path) == bad


def test_validate_arguments_keeps_order(tmp_path):
    paths = [write_png(tmp_path / name) for name in ("z.png", "a.png", "m.png")]
    assert validate_arguments([str(p) for p in paths]) == paths

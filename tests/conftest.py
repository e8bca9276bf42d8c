import threading
import time
from pathlib import Path

import pytest

from photoalbum.config import load_app_config
from photoalbum.transforms import TransformError, TransformTool


class Timeline:
    """Thread-safe record of (event, subject) pairs in the order they happened."""

    def __init__(self):
        self.events = []
        self._lock = threading.Lock()

    def record(self, event, subject):
        with self._lock:
            self.events.append((event, subject))

    def position(self, event, subject):
        return self.events.index((event, subject))

    def subjects(self, event):
        return [subject for name, subject in self.events if name == event]


class FakeTool(TransformTool):
    """Writes placeholder files instead of calling ImageMagick."""

    def __init__(self, timeline=None, derive_delays=None, display_delay=0.0, fail_derive=()):
        self.timeline = timeline or Timeline()
        self.derive_delays = derive_delays or {}
        self.display_delay = display_delay
        self.fail_derive = set(fail_derive)
        self.rotations = []
        self._lock = threading.Lock()

    def derive(self, source, destination, percent):
        time.sleep(self.derive_delays.get(Path(source).name, 0.0))
        if Path(source).name in self.fail_derive:
            raise TransformError(f"cannot resize {source}")
        Path(destination).write_bytes(b"\x89PNG\r\n\x1a\n")
        self.timeline.record("derived", Path(destination).name)
        return destination

    def rotate(self, artifact, rotation):
        with self._lock:
            self.rotations.append((Path(artifact).name, rotation))
        self.timeline.record("rotated", Path(artifact).name)
        return artifact

    def display(self, artifact):
        self.timeline.record("display", Path(artifact).name)
        time.sleep(self.display_delay)


class ScriptedInput:
    """Answers prompts from a fixed script, optionally pausing before an answer."""

    def __init__(self, answers, timeline=None, delays=None):
        self.answers = list(answers)
        self.timeline = timeline or Timeline()
        self.delays = delays or {}
        self.prompts = []
        self._lock = threading.Lock()

    def __call__(self, prompt):
        with self._lock:
            position = len(self.prompts)
            self.prompts.append(prompt)
            if position >= len(self.answers):
                raise EOFError
            answer = self.answers[position]
        time.sleep(self.delays.get(position, 0.0))
        self.timeline.record("answered", position)
        return answer


def write_png(path: Path, size=(40, 20), color=(200, 30, 30)) -> Path:
    from PIL import Image

    Image.new("RGB", size, color).save(path, format="PNG")
    return path


@pytest.fixture
def timeline():
    return Timeline()


@pytest.fixture
def app_config(tmp_path):
    config = load_app_config(tmp_path / "missing.conf")
    config["output_dir"] = tmp_path / "album"
    config["poll_interval"] = 0.005
    return config


@pytest.fixture
def images(tmp_path):
    source_dir = tmp_path / "src"
    source_dir.mkdir()
    return [write_png(source_dir / name) for name in ("a.png", "b.png", "c.png")]

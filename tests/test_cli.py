import io

import pytest
from rich.console import Console

from photoalbum import cli

from conftest import FakeTool, ScriptedInput, write_png


def make_console(answers):
    console = Console(file=io.StringIO(), width=400, color_system=None)
    console.input = ScriptedInput(answers)
    return console


def test_no_images_is_a_usage_error(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 2
    assert "usage: photoalbum" in capsys.readouterr().err


def test_non_image_is_rejected_before_any_worker(tmp_path, monkeypatch):
    good = write_png(tmp_path / "good.png")
    bad = tmp_path / "readme.png"
    bad.write_text("not an image", encoding="utf-8")

    def must_not_run(*args, **kwargs):
        raise AssertionError("workflow started")

    monkeypatch.setattr(cli, "album_workflow", must_not_run)
    console = make_console([])

    rc = cli.main([str(good), str(bad)], console=console)

    assert rc == 1
    out = console.file.getvalue()
    assert "one (or more) img is not a valid image or path" in out
    assert "readme.png" in out


def test_full_run_builds_album(tmp_path, monkeypatch, app_config):
    images = [write_png(tmp_path / name) for name in ("x.png", "y.png")]
    app_config["output_dir"] = tmp_path / "ignored"
    monkeypatch.setattr(cli, "load_app_config", lambda: app_config)
    monkeypatch.setattr(cli, "get_tool", lambda config, confirm=None: FakeTool())
    console = make_console(["1", "ex", "3", "why"])
    out_dir = tmp_path / "out"

    rc = cli.main([str(p) for p in images] + ["--output-dir", str(out_dir), "-j", "2"], console=console)

    assert rc == 0
    assert (out_dir / "index.html").read_text(encoding="utf-8") == (
        '<a href="med_x.png"><img src="thumb_x.png"></a><h2>ex</h2>'
        '<a href="med_y.png"><img src="thumb_y.png"></a><h2>why</h2>'
    )
    out = console.file.getvalue()
    assert "Album Summary" in out
    assert "Digital Photo Album is Complete!" in out
    assert app_config["max_workers"] == 2


def test_failed_item_gives_nonzero_exit(tmp_path, monkeypatch, app_config):
    image = write_png(tmp_path / "only.png")
    monkeypatch.setattr(cli, "load_app_config", lambda: app_config)
    monkeypatch.setattr(cli, "get_tool", lambda config, confirm=None: FakeTool(fail_derive={"only.png"}))

    rc = cli.main([str(image)], console=make_console([]))

    assert rc == 1


def test_zero_workers_is_rejected(tmp_path, monkeypatch, app_config):
    image = write_png(tmp_path / "only.png")
    monkeypatch.setattr(cli, "load_app_config", lambda: app_config)

    rc = cli.main([str(image), "--max-workers", "0"], console=make_console([]))

    assert rc == 1

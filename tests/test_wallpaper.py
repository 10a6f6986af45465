from __future__ import annotations

import random
from pathlib import Path

import pytest

from dotfiles_installer.errors import NoWallpaperCandidatesError
from dotfiles_installer.wallpaper import (
    GnomeSetter,
    SwaybgSetter,
    WallpaperRotator,
    detect_setter,
)


class RecordingSetter:
    name = "recording"

    def __init__(self):
        self.applied = []
        self.sources = []

    def apply(self, image: Path, *, source=None) -> None:
        self.applied.append(image)
        self.sources.append(source)


@pytest.fixture
def pictures(tmp_path):
    d = tmp_path / "backgrounds"
    d.mkdir()
    (d / "a.jpg").write_bytes(b"image-a")
    (d / "b.jpg").write_bytes(b"image-b")
    (d / "current.jpg").write_bytes(b"old-current")
    return d


def test_only_non_marker_images_selected(pictures):
    setter = RecordingSetter()
    rotator = WallpaperRotator(pictures, setter, rng=random.Random(7))

    seen = set()
    for _ in range(40):
        chosen = rotator.rotate()
        seen.add(chosen.name)
        assert (pictures / "current.jpg").read_bytes() == chosen.read_bytes()

    assert seen == {"a.jpg", "b.jpg"}
    assert setter.applied == [pictures / "current.jpg"] * 40


def test_candidates_filter_extensions(pictures):
    (pictures / "notes.txt").write_text("x")
    (pictures / "C.PNG").write_bytes(b"png")
    (pictures / "current-old.png").write_bytes(b"x")
    (pictures / "sub.jpg").mkdir()
    names = [p.name for p in WallpaperRotator(pictures, RecordingSetter()).candidates()]
    assert names == ["C.PNG", "a.jpg", "b.jpg"]


def test_marker_is_a_copy_not_a_link(pictures):
    (pictures / "current.jpg").unlink()
    (pictures / "current.jpg").symlink_to(pictures / "a.jpg")
    rotator = WallpaperRotator(pictures, RecordingSetter(), rng=random.Random(0))

    chosen = rotator.rotate()
    marker = pictures / "current.jpg"
    assert not marker.is_symlink()
    chosen.unlink()
    assert marker.exists()
    assert (pictures / "a.jpg").exists() or (pictures / "b.jpg").exists()


def test_marker_only_directory_raises_and_leaves_marker(tmp_path):
    d = tmp_path / "backgrounds"
    d.mkdir()
    (d / "current.jpg").write_bytes(b"old-current")
    setter = RecordingSetter()

    with pytest.raises(NoWallpaperCandidatesError):
        WallpaperRotator(d, setter).rotate()

    assert (d / "current.jpg").read_bytes() == b"old-current"
    assert setter.applied == []


def test_empty_or_missing_directory_raises(tmp_path):
    empty = tmp_path / "empty"
    empty.mkdir()
    for d in (empty, tmp_path / "missing"):
        with pytest.raises(NoWallpaperCandidatesError):
            WallpaperRotator(d, RecordingSetter()).rotate()
    assert list(empty.iterdir()) == []


def test_gnome_setter_sets_both_keys_with_session_bus(runner, pictures):
    setter = GnomeSetter(run=runner, environ={}, uid=1000)
    marker = pictures / "current.jpg"
    setter.apply(marker)

    uri = marker.resolve().as_uri()
    assert runner.calls == [
        ["gsettings", "set", "org.gnome.desktop.background", "picture-uri", uri],
        ["gsettings", "set", "org.gnome.desktop.background", "picture-uri-dark", uri],
    ]
    assert runner.kwargs[0]["env"] == {"DBUS_SESSION_BUS_ADDRESS": "unix:path=/run/user/1000/bus"}


def test_gnome_setter_steps_through_source_so_repeat_rotations_redraw(runner, pictures):
    setter = GnomeSetter(run=runner, environ={"DBUS_SESSION_BUS_ADDRESS": "unix:path=/x"}, uid=1)
    marker = pictures / "current.jpg"
    setter.apply(marker, source=pictures / "a.jpg")

    uris = [argv[-1] for argv in runner.calls]
    source_uri = (pictures / "a.jpg").resolve().as_uri()
    marker_uri = marker.resolve().as_uri()
    assert uris == [source_uri, source_uri, marker_uri, marker_uri]


def test_rotate_passes_selection_as_source(pictures):
    setter = RecordingSetter()
    chosen = WallpaperRotator(pictures, setter, rng=random.Random(3)).rotate()
    assert setter.applied == [pictures / "current.jpg"]
    assert setter.sources == [chosen]


def test_gnome_setter_keeps_existing_bus(runner):
    setter = GnomeSetter(run=runner, environ={"DBUS_SESSION_BUS_ADDRESS": "unix:path=/x"}, uid=1)
    assert setter.session_env() == {}


def test_swaybg_setter_replaces_running_instance(runner, pictures):
    spawned = []
    setter = SwaybgSetter(run=runner, spawn=lambda argv, **kw: spawned.append(argv))
    setter.apply(pictures / "current.jpg")
    assert runner.calls == [["pkill", "-x", "swaybg"]]
    assert spawned == [["swaybg", "-i", str(pictures / "current.jpg"), "-m", "fill"]]


@pytest.mark.parametrize(
    "environ, expected",
    [
        ({"XDG_CURRENT_DESKTOP": "ubuntu:GNOME"}, GnomeSetter),
        ({"XDG_CURRENT_DESKTOP": "sway"}, SwaybgSetter),
        ({"DESKTOP_SESSION": "niri"}, SwaybgSetter),
    ],
)
def test_detect_from_session_hints(runner, environ, expected):
    assert isinstance(detect_setter(environ=environ, run=runner, uid=1000), expected)
    assert runner.calls == []


def test_detect_without_hints_probes_gnome_shell(runner):
    runner.script(lambda argv: argv[0] == "pgrep", (0, ""))
    assert isinstance(detect_setter(environ={}, run=runner, uid=1000), GnomeSetter)
    assert runner.calls == [["pgrep", "-x", "-u", "1000", "gnome-shell"]]


def test_detect_without_hints_falls_back_to_swaybg(runner):
    runner.script(lambda argv: argv[0] == "pgrep", (1, ""))
    assert isinstance(detect_setter(environ={}, run=runner, uid=1000), SwaybgSetter)


def test_explicit_backend(runner):
    assert isinstance(detect_setter("swaybg", environ={"XDG_CURRENT_DESKTOP": "GNOME"}, run=runner), SwaybgSetter)

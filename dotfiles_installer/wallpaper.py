"""Random wallpaper rotation.

Picks an image from the picture directory, byte-copies it over the
``current.jpg`` marker (lock screens and other consumers read that stable
name) and hands the marker to the desktop's wallpaper mechanism.
"""

from __future__ import annotations

import logging
import os
import random
import shutil
from pathlib import Path
from typing import List, Mapping, Optional, Protocol, Sequence

from .errors import NoWallpaperCandidatesError
from .lib.command import Runner, run_cmd, spawn_detached

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")
MARKER_TOKEN = "current"
MARKER_NAME = "current.jpg"


class WallpaperSetter(Protocol):
    name: str

    def apply(self, image: Path, *, source: Optional[Path] = None) -> None:
        ...


class SwaybgSetter:
    name = "swaybg"

    def __init__(self, *, mode: str = "fill", run: Runner = run_cmd, spawn=spawn_detached, dry_run: bool = False):
        self.mode = mode
        self.run = run
        self.spawn = spawn
        self.dry_run = dry_run

    def apply(self, image: Path, *, source: Optional[Path] = None) -> None:
        # One swaybg per output; drop the previous instance before starting a new one.
        self.run(["pkill", "-x", "swaybg"], check=False, dry_run=self.dry_run)
        self.spawn(["swaybg", "-i", str(image), "-m", self.mode], dry_run=self.dry_run)


class GnomeSetter:
    name = "gnome"
    SCHEMA = "org.gnome.desktop.background"
    KEYS = ("picture-uri", "picture-uri-dark")

    def __init__(
        self,
        *,
        run: Runner = run_cmd,
        environ: Optional[Mapping[str, str]] = None,
        uid: Optional[int] = None,
        dry_run: bool = False,
    ):
        self.run = run
        self.environ = os.environ if environ is None else environ
        self.uid = os.getuid() if uid is None else uid
        self.dry_run = dry_run

    def session_env(self) -> dict:
        # cron/systemd timers have no session bus address; point at the user's bus.
        if self.environ.get("DBUS_SESSION_BUS_ADDRESS"):
            return {}
        return {"DBUS_SESSION_BUS_ADDRESS": f"unix:path=/run/user/{self.uid}/bus"}

    def apply(self, image: Path, *, source: Optional[Path] = None) -> None:
        env = self.session_env()
        uris = [image.resolve().as_uri()]
        if source is not None:
            # GNOME ignores a set to the value it already holds; step through the source first.
            uris.insert(0, source.resolve().as_uri())
        for uri in uris:
            for key in self.KEYS:
                self.run(["gsettings", "set", self.SCHEMA, key, uri], env=env, dry_run=self.dry_run)


def _gnome_session(environ: Mapping[str, str], run: Runner, uid: int) -> bool:
    desktop = (environ.get("XDG_CURRENT_DESKTOP", "") + ":" + environ.get("DESKTOP_SESSION", "")).lower()
    if "gnome" in desktop:
        return True
    if desktop.strip(":"):
        return False
    # No session hints (cron): look for a running gnome-shell owned by us.
    r = run(["pgrep", "-x", "-u", str(uid), "gnome-shell"], check=False)
    return r.returncode == 0


def detect_setter(
    backend: str = "auto",
    *,
    environ: Optional[Mapping[str, str]] = None,
    run: Runner = run_cmd,
    uid: Optional[int] = None,
    dry_run: bool = False,
) -> WallpaperSetter:
    environ = os.environ if environ is None else environ
    uid = os.getuid() if uid is None else uid

    if backend == "auto":
        backend = "gnome" if _gnome_session(environ, run, uid) else "swaybg"
        logger.debug("Wallpaper backend detected: %s", backend)

    if backend == "gnome":
        return GnomeSetter(run=run, environ=environ, uid=uid, dry_run=dry_run)
    if backend == "swaybg":
        return SwaybgSetter(run=run, dry_run=dry_run)
    raise ValueError(f"Unknown wallpaper backend: {backend!r}")


class WallpaperRotator:
    def __init__(
        self,
        picture_dir: Path,
        setter: WallpaperSetter,
        *,
        rng: Optional[random.Random] = None,
        marker_name: str = MARKER_NAME,
        extensions: Sequence[str] = IMAGE_EXTENSIONS,
    ):
        self.picture_dir = Path(picture_dir)
        self.setter = setter
        self.rng = rng or random.Random()
        self.marker_name = marker_name
        self.extensions = tuple(e.lower() for e in extensions)

    @property
    def marker(self) -> Path:
        return self.picture_dir / self.marker_name

    def candidates(self) -> List[Path]:
        if not self.picture_dir.is_dir():
            return []
        return sorted(
            p
            for p in self.picture_dir.iterdir()
            if p.is_file()
            and p.suffix.lower() in self.extensions
            and MARKER_TOKEN not in p.name.lower()
        )

    def rotate(self) -> Path:
        """Select, copy over the marker, apply. Returns the selected image."""

        candidates = self.candidates()
        if not candidates:
            raise NoWallpaperCandidatesError(f"No wallpaper candidates in {self.picture_dir}")

        chosen = self.rng.choice(candidates)
        logger.info("Selected wallpaper %s", chosen.name)

        marker = self.marker
        if marker.is_symlink():
            marker.unlink()
        shutil.copyfile(chosen, marker)

        self.setter.apply(marker, source=chosen)
        logger.info("Wallpaper set via %s", self.setter.name)
        return chosen

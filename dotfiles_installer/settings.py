from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .lib.fonts import NERD_FONT_URL

DEFAULT_CONFIG_PATH = "~/.config/dotfiles-installer/config.yaml"
DEFAULT_DOTFILES_REPO = "https://github.com/thomas2766366/dotfiles.git"

PROFILES = ("desktop", "server")
DOTFILES_METHODS = ("bare", "copy")
WALLPAPER_BACKENDS = ("auto", "swaybg", "gnome")

# Paths a server install manages (and backs up before touching).
SERVER_PATHS = [".zshrc", ".p10k.zsh", ".config/nvim"]


def _opt_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    return bool(value)


@dataclass(frozen=True)
class Settings:
    raw: Dict[str, Any]

    @property
    def profile(self) -> str:
        value = str(self.raw.get("profile") or "desktop").strip().lower()
        if value not in PROFILES:
            raise ValueError(f"profile must be one of {', '.join(PROFILES)}, got {value!r}")
        return value

    @property
    def dotfiles_repo(self) -> str:
        return str(self.raw.get("dotfiles_repo") or DEFAULT_DOTFILES_REPO)

    @property
    def git_dir(self) -> str:
        return str(self.raw.get("git_dir") or "~/dotfiles")

    @property
    def sudo(self) -> bool:
        return bool(self.raw.get("sudo", True))

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))

    @property
    def assume_yes(self) -> bool:
        return bool(self.raw.get("assume_yes", False))

    @property
    def install_font(self) -> Optional[bool]:
        """None means: desktop installs, server asks."""
        return _opt_bool(self.raw.get("install_font"))

    @property
    def dotfiles_method(self) -> Optional[str]:
        value = self.raw.get("dotfiles_method")
        if value is None:
            return None
        value = str(value).strip().lower()
        if value not in DOTFILES_METHODS:
            raise ValueError(f"dotfiles_method must be one of {', '.join(DOTFILES_METHODS)}, got {value!r}")
        return value

    @property
    def font_url(self) -> str:
        return str(self.raw.get("font_url") or NERD_FONT_URL)

    @property
    def server_paths(self) -> List[str]:
        return list(self.raw.get("server_paths") or SERVER_PATHS)

    @property
    def background_script(self) -> str:
        return str(self.raw.get("background_script") or "backgrounds/change-bg.sh")

    @property
    def wallpaper_dir(self) -> str:
        return str(((self.raw.get("wallpaper") or {}).get("dir")) or "~/backgrounds")

    @property
    def wallpaper_backend(self) -> str:
        value = str(((self.raw.get("wallpaper") or {}).get("backend")) or "auto").strip().lower()
        if value not in WALLPAPER_BACKENDS:
            raise ValueError(f"wallpaper.backend must be one of {', '.join(WALLPAPER_BACKENDS)}, got {value!r}")
        return value

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with non-None overrides applied (command-line flags win over the file)."""

        raw = dict(self.raw)
        wallpaper = dict(raw.get("wallpaper") or {})
        for key, value in overrides.items():
            if value is None:
                continue
            if key.startswith("wallpaper_"):
                wallpaper[key[len("wallpaper_"):]] = value
            else:
                raw[key] = value
        if wallpaper:
            raw["wallpaper"] = wallpaper
        return Settings(raw=raw)


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings from YAML.

    An explicit path must exist; the default location is optional.
    """

    explicit = path is not None
    p = Path(os.path.expanduser(path or DEFAULT_CONFIG_PATH))
    if not p.exists():
        if explicit:
            raise FileNotFoundError(str(p))
        return Settings(raw={})

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("config must be YAML")

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{p} must contain a mapping/object")

    return Settings(raw=raw)

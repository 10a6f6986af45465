from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional

from .lib.command import Runner, run_cmd
from .lib.distro import DistributionId
from .settings import Settings


@dataclass(frozen=True)
class HostEnvironment:
    """The only environment variables the installer consumes."""

    home: Path
    shell: str = ""
    zsh_custom: Optional[str] = None
    path: Optional[str] = None

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "HostEnvironment":
        environ = os.environ if environ is None else environ
        home = environ.get("HOME") or os.path.expanduser("~")
        return cls(
            home=Path(home),
            shell=environ.get("SHELL", ""),
            zsh_custom=environ.get("ZSH_CUSTOM") or None,
            path=environ.get("PATH"),
        )


@dataclass(frozen=True)
class InstallPlan:
    """Answers to every interactive question, decided before any step runs."""

    proceed: bool = True
    dotfiles_method: str = "bare"
    install_font: bool = True


@dataclass(frozen=True)
class InstallContext:
    settings: Settings
    plan: InstallPlan
    distro: DistributionId
    env: HostEnvironment
    run: Runner = run_cmd
    started_at: datetime = field(default_factory=datetime.now)

    @property
    def dry_run(self) -> bool:
        return self.settings.dry_run

    @property
    def profile(self) -> str:
        return self.settings.profile

    @property
    def home(self) -> Path:
        return self.env.home

    def expand(self, p: str) -> Path:
        """Expand a leading ~ against the context home, not the process HOME."""

        if p == "~" or p.startswith("~/"):
            return self.home / p[2:]
        path = Path(p)
        return path if path.is_absolute() else self.home / path

    @property
    def oh_my_zsh_dir(self) -> Path:
        return self.home / ".oh-my-zsh"

    @property
    def zsh_custom(self) -> Path:
        if self.env.zsh_custom:
            return self.expand(self.env.zsh_custom)
        return self.oh_my_zsh_dir / "custom"

    @property
    def git_dir(self) -> Path:
        return self.expand(self.settings.git_dir)

    @property
    def font_dir(self) -> Path:
        return self.home / ".local" / "share" / "fonts"

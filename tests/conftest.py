from __future__ import annotations

import os
import stat
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from dotfiles_installer.context import HostEnvironment, InstallContext, InstallPlan
from dotfiles_installer.errors import CommandError
from dotfiles_installer.lib.command import CmdResult
from dotfiles_installer.lib.distro import DistributionId
from dotfiles_installer.settings import Settings

STARTED_AT = datetime(2026, 10, 19, 12, 30, 45)

Predicate = Callable[[List[str]], bool]


class FakeRunner:
    """Records argv lists; replies with scripted (returncode, stderr) pairs.

    `git clone` creates its destination directory so idempotence checks see
    the same filesystem a real clone would leave behind.
    """

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.kwargs: List[Dict[str, Any]] = []
        self._scripts: List[Tuple[Predicate, List[Tuple[int, str]]]] = []

    def script(self, predicate: Predicate, *replies: Tuple[int, str]) -> None:
        self._scripts.append((predicate, list(replies)))

    def _reply(self, argv: List[str]) -> Tuple[int, str]:
        for predicate, replies in self._scripts:
            if predicate(argv) and replies:
                return replies.pop(0) if len(replies) > 1 else replies[0]
        return 0, ""

    def calls_with(self, token: str) -> List[List[str]]:
        return [c for c in self.calls if token in c]

    def __call__(self, argv, *, check: bool = True, dry_run: bool = False, **kwargs) -> CmdResult:
        argv = list(argv)
        self.calls.append(argv)
        self.kwargs.append(dict(kwargs, check=check, dry_run=dry_run))

        returncode, stderr = self._reply(argv)
        if returncode == 0 and argv[:2] == ["git", "clone"]:
            Path(argv[-1]).mkdir(parents=True, exist_ok=True)

        if check and returncode != 0:
            raise CommandError(argv, returncode, stderr)
        return CmdResult(argv=argv, returncode=returncode, stdout="", stderr=stderr)


def make_tool(bin_dir: Path, name: str) -> Path:
    bin_dir.mkdir(parents=True, exist_ok=True)
    p = bin_dir / name
    p.write_text("#!/bin/sh\nexit 0\n")
    p.chmod(p.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return p


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def home(tmp_path: Path) -> Path:
    h = tmp_path / "home"
    h.mkdir()
    return h


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    b = tmp_path / "bin"
    b.mkdir()
    return b


@pytest.fixture
def make_ctx(home: Path, bin_dir: Path, runner: FakeRunner):
    def _make(
        *,
        profile: str = "desktop",
        distro: DistributionId = DistributionId.ARCH,
        plan: Optional[InstallPlan] = None,
        shell: str = "/bin/bash",
        zsh_custom: Optional[str] = None,
        **raw: Any,
    ) -> InstallContext:
        raw.setdefault("dotfiles_repo", "https://example.invalid/dotfiles.git")
        return InstallContext(
            settings=Settings(raw=dict(raw, profile=profile)),
            plan=plan or InstallPlan(),
            distro=distro,
            env=HostEnvironment(home=home, shell=shell, zsh_custom=zsh_custom, path=str(bin_dir)),
            run=runner,
            started_at=STARTED_AT,
        )

    return _make


def tree(root: Path) -> List[str]:
    return sorted(os.path.relpath(p, root) for p in root.rglob("*"))

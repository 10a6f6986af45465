from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Type

from ..errors import CommandError
from .command import Runner, run_cmd, sudo_prefix, which
from .distro import DistributionId

logger = logging.getLogger(__name__)

AUR_HELPERS = ("yay", "paru")


class Packager(ABC):
    """Shells out to one native package manager. Concrete classes only build argv."""

    family: str = ""

    def __init__(self, *, sudo: bool = True, run: Runner = run_cmd, dry_run: bool = False) -> None:
        self.sudo = sudo
        self.run = run
        self.dry_run = dry_run

    @abstractmethod
    def update_argv(self) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    def install_argv(self, packages: Sequence[str]) -> List[str]:
        raise NotImplementedError

    def commands(self, packages: Sequence[str], *, update: bool = True) -> List[List[str]]:
        cmds: List[List[str]] = []
        if update:
            cmds.append(sudo_prefix(self.update_argv(), sudo=self.sudo))
        if packages:
            cmds.append(sudo_prefix(self.install_argv(packages), sudo=self.sudo))
        return cmds

    def install(self, packages: Sequence[str], *, update: bool = True) -> None:
        # Package manager output streams to the terminal; a non-zero exit raises CommandError.
        for argv in self.commands(packages, update=update):
            self.run(argv, capture=False, dry_run=self.dry_run)


class AptPackager(Packager):
    family = "apt"

    def update_argv(self) -> List[str]:
        return ["apt", "update"]

    def install_argv(self, packages: Sequence[str]) -> List[str]:
        return ["apt", "install", "-y", *packages]


class PacmanPackager(Packager):
    family = "pacman"

    def update_argv(self) -> List[str]:
        return ["pacman", "-Syu", "--noconfirm"]

    def install_argv(self, packages: Sequence[str]) -> List[str]:
        return ["pacman", "-S", "--noconfirm", *packages]


class DnfPackager(Packager):
    family = "dnf"

    def update_argv(self) -> List[str]:
        return ["dnf", "update", "-y"]

    def install_argv(self, packages: Sequence[str]) -> List[str]:
        return ["dnf", "install", "-y", *packages]


PACKAGERS: Dict[str, Type[Packager]] = {
    "apt": AptPackager,
    "pacman": PacmanPackager,
    "dnf": DnfPackager,
}


def get_packager(
    distro: DistributionId,
    *,
    sudo: bool = True,
    run: Runner = run_cmd,
    dry_run: bool = False,
) -> Packager:
    ctor = PACKAGERS.get(distro.family)
    if ctor is None:
        raise ValueError(f"No packager registered for family {distro.family!r}")
    return ctor(sudo=sudo, run=run, dry_run=dry_run)


def find_aur_helper(path: Optional[str] = None) -> Optional[str]:
    for helper in AUR_HELPERS:
        if which(helper, path):
            return helper
    return None


def aur_install(
    packages: Sequence[str],
    *,
    helper: Optional[str],
    run: Runner = run_cmd,
    dry_run: bool = False,
) -> bool:
    """Best-effort AUR install. Returns False (and warns) instead of raising."""

    if not packages:
        return True
    if helper is None:
        logger.warning("No AUR helper found. Install yay or paru to install: %s", " ".join(packages))
        return False
    try:
        run([helper, "-S", "--noconfirm", *packages], capture=False, dry_run=dry_run)
    except CommandError as e:
        logger.warning("Failed to install %s via %s (exit %s), install manually if needed",
                       " ".join(packages), helper, e.returncode)
        return False
    return True

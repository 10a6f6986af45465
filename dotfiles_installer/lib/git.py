from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ..errors import CheckoutConflictError, CommandError
from .command import Runner, run_cmd

logger = logging.getLogger(__name__)

GIT = "git"
CONFLICT_MARKER = "untracked working tree files would be overwritten"


def parse_conflicts(stderr: str) -> List[str]:
    """Extract the path list git prints after the 'would be overwritten' error."""

    paths: List[str] = []
    collecting = False
    for line in stderr.splitlines():
        if CONFLICT_MARKER in line:
            collecting = True
            continue
        if not collecting:
            continue
        if line[:1] in ("\t", " ") and line.strip():
            paths.append(line.strip())
        elif line.strip():
            # "Please move or remove them..." / "Aborting" ends the block.
            collecting = False
    return paths


def clone(
    url: str,
    dest: Path,
    *,
    bare: bool = False,
    depth: Optional[int] = None,
    run: Runner = run_cmd,
    dry_run: bool = False,
) -> None:
    argv = [GIT, "clone"]
    if bare:
        argv.append("--bare")
    if depth:
        argv += ["--depth", str(depth)]
    argv += [url, str(dest)]
    run(argv, dry_run=dry_run)


@dataclass(frozen=True)
class BareRepo:
    """A bare repository checked out against an arbitrary work tree (here: $HOME)."""

    git_dir: Path
    work_tree: Path

    def argv(self, *args: str) -> List[str]:
        return [GIT, f"--git-dir={self.git_dir}", f"--work-tree={self.work_tree}", *args]

    def checkout(
        self,
        paths: Sequence[str] = (),
        *,
        force: bool = False,
        run: Runner = run_cmd,
        dry_run: bool = False,
    ) -> None:
        args = ["checkout"]
        if force:
            args.append("-f")
        if paths:
            # A fresh bare clone has no index; restore the paths from the commit.
            args += ["HEAD", "--", *paths]
        argv = self.argv(*args)

        # Conflict parsing reads git's English messages.
        r = run(argv, check=False, env={"LC_ALL": "C"}, dry_run=dry_run)
        if r.returncode == 0:
            return

        conflicts = parse_conflicts(r.stderr)
        if conflicts:
            raise CheckoutConflictError(conflicts)
        raise CommandError(argv, r.returncode, r.stderr)

    def hide_untracked(self, *, run: Runner = run_cmd, dry_run: bool = False) -> None:
        run(self.argv("config", "--local", "status.showUntrackedFiles", "no"), dry_run=dry_run)

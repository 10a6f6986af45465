from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, Optional

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "dotfiles_backup_"


@dataclass
class BackupRecord:
    """Relative path -> backup location for one run. Never persisted."""

    root: Path
    entries: Dict[str, Path] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.entries)


def backup_root(home: Path, when: Optional[datetime] = None) -> Path:
    stamp = (when or datetime.now()).strftime("%Y%m%d_%H%M%S")
    root = home / f"{BACKUP_PREFIX}{stamp}"
    suffix = 0
    while root.exists():
        suffix += 1
        root = home / f"{BACKUP_PREFIX}{stamp}.{suffix}"
    return root


def _check_relative(rel: str) -> str:
    p = PurePosixPath(rel)
    if p.is_absolute() or ".." in p.parts or not p.parts:
        raise ValueError(f"Refusing to back up path outside the work tree: {rel!r}")
    return str(p)


def _copy(src: Path, dst: Path) -> None:
    if src.is_dir() and not src.is_symlink():
        shutil.copytree(src, dst, symlinks=True)
    else:
        shutil.copy2(src, dst, follow_symlinks=False)


def backup_paths(
    home: Path,
    rel_paths: Iterable[str],
    *,
    move: bool = True,
    when: Optional[datetime] = None,
    dry_run: bool = False,
) -> BackupRecord:
    """Move (or copy) existing paths under `home` into a timestamped backup directory.

    The directory is only created once the first path is backed up, and removed
    again if it ends up empty. Paths that don't exist are skipped.
    """

    logger.info("Backing up existing dotfiles...")
    record = BackupRecord(root=backup_root(home, when))

    for rel in rel_paths:
        rel = _check_relative(rel)
        src = home / rel
        if not (src.exists() or src.is_symlink()):
            continue

        dst = record.root / rel
        logger.info("Backing up %s", rel)
        record.entries[rel] = dst
        if dry_run:
            continue

        dst.parent.mkdir(parents=True, exist_ok=True)
        if move:
            shutil.move(str(src), str(dst))
        else:
            _copy(src, dst)

    if record.root.is_dir() and not any(record.root.iterdir()):
        record.root.rmdir()

    if record:
        logger.info("Existing files backed up to %s", record.root)
    else:
        logger.info("No files needed backing up")
    return record

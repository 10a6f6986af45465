from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import List

from ..context import InstallContext
from ..errors import CheckoutConflictError
from ..lib.backup import backup_paths
from ..lib.git import GIT, BareRepo, clone

logger = logging.getLogger(__name__)


def alias_line(ctx: InstallContext) -> str:
    git_dir = ctx.git_dir
    try:
        shown = "$HOME/" + str(git_dir.relative_to(ctx.home))
    except ValueError:
        shown = str(git_dir)
    return f"alias dotfiles='{GIT} --git-dir={shown}/ --work-tree=$HOME'"


class InstallDotfilesStep:
    step_id = "70_install_dotfiles"

    def applies(self, ctx: InstallContext) -> bool:
        return True

    def run(self, ctx: InstallContext) -> None:
        if ctx.plan.dotfiles_method == "copy":
            self._install_copy(ctx)
        else:
            self._install_bare(ctx)

    def _paths(self, ctx: InstallContext) -> List[str]:
        # Desktop checks out the whole tree; server only the managed paths.
        return ctx.settings.server_paths if ctx.profile == "server" else []

    def _install_bare(self, ctx: InstallContext) -> None:
        logger.info("Installing dotfiles as bare repository...")
        git_dir = ctx.git_dir
        if git_dir.exists():
            logger.warning("Removing existing dotfiles directory %s", git_dir)
            if not ctx.dry_run:
                shutil.rmtree(git_dir)

        clone(ctx.settings.dotfiles_repo, git_dir, bare=True, run=ctx.run, dry_run=ctx.dry_run)

        repo = BareRepo(git_dir=git_dir, work_tree=ctx.home)
        paths = self._paths(ctx)
        try:
            repo.checkout(paths, run=ctx.run, dry_run=ctx.dry_run)
        except CheckoutConflictError as e:
            logger.warning("Some files would be overwritten. Backing them up first...")
            if ctx.profile == "server":
                # Managed paths were already copied aside by the backup step.
                repo.checkout(paths, force=True, run=ctx.run, dry_run=ctx.dry_run)
            else:
                backup_paths(ctx.home, e.paths, move=True, when=ctx.started_at, dry_run=ctx.dry_run)
                repo.checkout(paths, run=ctx.run, dry_run=ctx.dry_run)

        repo.hide_untracked(run=ctx.run, dry_run=ctx.dry_run)

        if ctx.profile == "server":
            self._ensure_alias(ctx)

        logger.info("Dotfiles installed successfully")

    def _ensure_alias(self, ctx: InstallContext) -> None:
        zshrc = ctx.home / ".zshrc"
        existing = zshrc.read_text(encoding="utf-8") if zshrc.is_file() else ""
        if "alias dotfiles=" in existing:
            return
        line = alias_line(ctx)
        logger.info("Adding dotfiles alias to %s", zshrc)
        if ctx.dry_run:
            return
        with zshrc.open("a", encoding="utf-8") as fh:
            if existing and not existing.endswith("\n"):
                fh.write("\n")
            fh.write(line + "\n")

    def _install_copy(self, ctx: InstallContext) -> None:
        logger.info("Installing dotfiles by copy...")
        with tempfile.TemporaryDirectory(prefix="dotfiles-") as tmp:
            checkout = Path(tmp) / "dotfiles"
            clone(ctx.settings.dotfiles_repo, checkout, run=ctx.run, dry_run=ctx.dry_run)

            for rel in ctx.settings.server_paths:
                src = checkout / rel
                dst = ctx.home / rel
                if not src.exists():
                    logger.debug("%s not in dotfiles repository", rel)
                    continue
                logger.info("Copying %s", rel)
                if ctx.dry_run:
                    continue
                dst.parent.mkdir(parents=True, exist_ok=True)
                if src.is_dir():
                    shutil.copytree(src, dst, dirs_exist_ok=True)
                else:
                    shutil.copy2(src, dst)

        logger.info("Dotfiles installed successfully")
        logger.info("Note: dotfiles alias not configured - using direct file copies")

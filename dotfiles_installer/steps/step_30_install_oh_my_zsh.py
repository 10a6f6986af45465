from __future__ import annotations

import logging

from ..context import InstallContext
from ..lib.git import clone
from ..lib.manifests import load_shell_manifest

logger = logging.getLogger(__name__)


class InstallOhMyZshStep:
    step_id = "30_install_oh_my_zsh"

    def applies(self, ctx: InstallContext) -> bool:
        return True

    def run(self, ctx: InstallContext) -> None:
        logger.info("Installing oh-my-zsh...")
        if ctx.oh_my_zsh_dir.is_dir():
            logger.warning("oh-my-zsh is already installed")
            return

        manifest = load_shell_manifest()
        clone(manifest.framework_url, ctx.oh_my_zsh_dir, depth=1, run=ctx.run, dry_run=ctx.dry_run)
        logger.info("oh-my-zsh installed successfully")

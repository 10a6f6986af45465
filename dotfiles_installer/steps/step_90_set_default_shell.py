from __future__ import annotations

import logging
import os

from ..context import InstallContext
from ..lib.command import which

logger = logging.getLogger(__name__)


def _same_binary(a: str, b: str) -> bool:
    return bool(a) and (a == b or os.path.realpath(a) == os.path.realpath(b))


class SetDefaultShellStep:
    step_id = "90_set_default_shell"

    def applies(self, ctx: InstallContext) -> bool:
        return True

    def run(self, ctx: InstallContext) -> None:
        logger.info("Setting zsh as default shell...")
        zsh = which("zsh", ctx.env.path)
        if not zsh:
            logger.warning("zsh not found on PATH; default shell left unchanged")
            return

        if _same_binary(ctx.env.shell, zsh):
            logger.info("zsh is already the default shell")
            return

        ctx.run(["chsh", "-s", zsh], capture=False, dry_run=ctx.dry_run)
        logger.info("Default shell set to zsh. Please log out and log back in for changes to take effect.")

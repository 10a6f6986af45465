from __future__ import annotations

import logging
import stat

from ..context import InstallContext

logger = logging.getLogger(__name__)


class SetupBackgroundsStep:
    step_id = "80_setup_backgrounds"

    def applies(self, ctx: InstallContext) -> bool:
        return ctx.profile == "desktop"

    def run(self, ctx: InstallContext) -> None:
        logger.info("Setting up background scripts...")
        script = ctx.expand(ctx.settings.background_script)
        if not script.is_file():
            logger.warning("Background script not found at %s", script)
            return

        if not ctx.dry_run:
            mode = script.stat().st_mode
            script.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        logger.info("Background script is now executable")

from __future__ import annotations

import logging

from ..context import InstallContext
from ..errors import CommandError
from ..lib.fonts import install_nerd_font

logger = logging.getLogger(__name__)


class InstallNerdFontStep:
    step_id = "50_install_nerd_font"

    def applies(self, ctx: InstallContext) -> bool:
        return ctx.plan.install_font

    def run(self, ctx: InstallContext) -> None:
        logger.info("Checking for Nerd Fonts...")
        try:
            install_nerd_font(
                ctx.font_dir,
                url=ctx.settings.font_url,
                run=ctx.run,
                path=ctx.env.path,
                dry_run=ctx.dry_run,
            )
        except CommandError:
            if ctx.profile == "desktop":
                raise
            # Fonts only matter for the SSH client's terminal on servers.
            logger.warning("Failed to download Nerd Font. This is optional for servers.")

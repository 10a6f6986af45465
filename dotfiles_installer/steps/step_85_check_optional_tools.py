from __future__ import annotations

import logging

from ..context import InstallContext
from ..lib.command import which
from ..lib.manifests import optional_tools

logger = logging.getLogger(__name__)


class CheckOptionalToolsStep:
    step_id = "85_check_optional_tools"

    def applies(self, ctx: InstallContext) -> bool:
        return bool(optional_tools(ctx.profile))

    def run(self, ctx: InstallContext) -> None:
        for tool, url in optional_tools(ctx.profile).items():
            logger.info("Checking for %s...", tool)
            if which(tool, ctx.env.path):
                logger.info("%s is already installed", tool)
            else:
                logger.warning("%s not found. You may need to install it manually.", tool)
                logger.info("Visit: %s", url)

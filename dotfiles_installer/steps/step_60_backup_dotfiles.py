from __future__ import annotations

import logging

from ..context import InstallContext
from ..lib.backup import backup_paths

logger = logging.getLogger(__name__)


class BackupDotfilesStep:
    """Server installs snapshot the managed paths (by copy) before touching them."""

    step_id = "60_backup_dotfiles"

    def applies(self, ctx: InstallContext) -> bool:
        return ctx.profile == "server"

    def run(self, ctx: InstallContext) -> None:
        backup_paths(
            ctx.home,
            ctx.settings.server_paths,
            move=False,
            when=ctx.started_at,
            dry_run=ctx.dry_run,
        )

from __future__ import annotations

import logging
from pathlib import Path

from ..context import InstallContext
from ..lib.git import clone
from ..lib.manifests import ShellComponent, load_shell_manifest

logger = logging.getLogger(__name__)


def component_dir(zsh_custom: Path, component: ShellComponent) -> Path:
    return zsh_custom / f"{component.kind}s" / component.name


class InstallZshPluginsStep:
    """Plugins and the prompt theme, each cloned into $ZSH_CUSTOM unless already there."""

    step_id = "40_install_zsh_plugins"

    def applies(self, ctx: InstallContext) -> bool:
        return True

    def run(self, ctx: InstallContext) -> None:
        logger.info("Installing zsh plugins and theme...")
        for component in load_shell_manifest().components:
            dest = component_dir(ctx.zsh_custom, component)
            if dest.is_dir():
                logger.warning("%s already installed", component.name)
                continue
            clone(component.url, dest, run=ctx.run, dry_run=ctx.dry_run)
            logger.info("%s installed", component.name)

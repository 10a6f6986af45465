from __future__ import annotations

import logging

from ..context import InstallContext
from ..lib.command import which
from ..lib.manifests import extras, package_list
from ..lib.pkg import aur_install, find_aur_helper, get_packager

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "20_install_packages"

    def applies(self, ctx: InstallContext) -> bool:
        return True

    def run(self, ctx: InstallContext) -> None:
        family = ctx.distro.family
        packages = package_list(ctx.profile, family)
        logger.info("Installing packages for %s...", ctx.distro.value)

        packager = get_packager(ctx.distro, sudo=ctx.settings.sudo, run=ctx.run, dry_run=ctx.dry_run)
        packager.install(packages)
        logger.info("Packages installed successfully")

        self._install_extras(ctx)

    def _install_extras(self, ctx: InstallContext) -> None:
        ex = extras(ctx.profile)
        aur = [str(p) for p in ex.get("aur") or []]
        manual = ex.get("manual") or {}

        if ctx.distro.family == "pacman" and aur:
            aur_install(aur, helper=find_aur_helper(ctx.env.path), run=ctx.run, dry_run=ctx.dry_run)
            return

        for name, url in manual.items():
            if which(str(name), ctx.env.path):
                continue
            logger.warning("%s not available in %s, you may need to install it manually", name, ctx.distro.family)
            logger.info("Visit: %s", url)

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Optional

from .command import Runner, run_cmd, which

logger = logging.getLogger(__name__)

NERD_FONT_URL = "https://github.com/ryanoasis/nerd-fonts/releases/latest/download/JetBrainsMono.zip"


def nerd_font_installed(font_dir: Path) -> bool:
    return font_dir.is_dir() and any(font_dir.glob("*Nerd*.ttf"))


def install_nerd_font(
    font_dir: Path,
    *,
    url: str = NERD_FONT_URL,
    run: Runner = run_cmd,
    path: Optional[str] = None,
    dry_run: bool = False,
) -> bool:
    """Download and unpack a Nerd Font archive into font_dir.

    Returns False when a Nerd Font is already present (nothing done).
    """

    if nerd_font_installed(font_dir):
        logger.info("Nerd Font already installed")
        return False

    if not dry_run:
        font_dir.mkdir(parents=True, exist_ok=True)

    archive_name = url.rsplit("/", 1)[-1] or "font.zip"
    logger.info("Downloading %s...", archive_name)
    with tempfile.TemporaryDirectory(prefix="dotfiles-font-") as tmp:
        archive = Path(tmp) / archive_name
        run(["wget", "-q", url, "-O", str(archive)], dry_run=dry_run)
        run(["unzip", "-q", "-o", str(archive), "-d", str(font_dir)], dry_run=dry_run)

    if which("fc-cache", path):
        run(["fc-cache", "-f", str(font_dir)], check=False, dry_run=dry_run)
    else:
        logger.debug("fc-cache not found; skipping font cache refresh")

    logger.info("%s installed to %s", archive_name.rsplit(".", 1)[0], font_dir)
    return True

from __future__ import annotations

import logging
import shlex
from enum import Enum
from pathlib import Path
from typing import Dict

from ..errors import DistributionDetectionError, UnsupportedDistributionError

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = "/etc/os-release"


class DistributionId(str, Enum):
    UBUNTU = "ubuntu"
    DEBIAN = "debian"
    ARCH = "arch"
    MANJARO = "manjaro"
    FEDORA = "fedora"

    @property
    def family(self) -> str:
        return _FAMILY[self]


_FAMILY = {
    DistributionId.UBUNTU: "apt",
    DistributionId.DEBIAN: "apt",
    DistributionId.ARCH: "pacman",
    DistributionId.MANJARO: "pacman",
    DistributionId.FEDORA: "dnf",
}


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse KEY=value lines of an os-release file (shell quoting rules)."""

    out: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        try:
            parts = shlex.split(value)
        except ValueError:
            parts = [value.strip("\"'")]
        out[key.strip()] = parts[0] if parts else ""
    return out


def detect_distribution(os_release_path: str = OS_RELEASE_PATH) -> DistributionId:
    p = Path(os_release_path)
    if not p.is_file():
        raise DistributionDetectionError(f"Cannot detect distribution: {p} not found")

    fields = parse_os_release(p.read_text(encoding="utf-8", errors="ignore"))
    distro_id = fields.get("ID", "").strip().lower()
    try:
        distro = DistributionId(distro_id)
    except ValueError:
        raise UnsupportedDistributionError(distro_id) from None

    logger.debug("os-release %s: ID=%s NAME=%s", p, distro_id, fields.get("NAME"))
    return distro

from __future__ import annotations

from typing import Sequence


class InstallerError(RuntimeError):
    """Base class for every failure the CLI turns into exit status 1."""


class DistributionDetectionError(InstallerError):
    pass


class UnsupportedDistributionError(InstallerError):
    def __init__(self, distro_id: str) -> None:
        super().__init__(f"Unsupported distribution: {distro_id or '<empty>'}")
        self.distro_id = distro_id


class CommandError(InstallerError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed ({returncode}): {' '.join(self.argv)}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)


class CheckoutConflictError(InstallerError):
    """Checkout refused because untracked files in the work tree would be overwritten."""

    def __init__(self, paths: Sequence[str]) -> None:
        self.paths = list(paths)
        super().__init__(f"Checkout would overwrite {len(self.paths)} untracked path(s)")


class NoWallpaperCandidatesError(InstallerError):
    pass

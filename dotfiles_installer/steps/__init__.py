from .step_20_install_packages import InstallPackagesStep
from .step_30_install_oh_my_zsh import InstallOhMyZshStep
from .step_40_install_zsh_plugins import InstallZshPluginsStep
from .step_50_install_nerd_font import InstallNerdFontStep
from .step_60_backup_dotfiles import BackupDotfilesStep
from .step_70_install_dotfiles import InstallDotfilesStep
from .step_80_setup_backgrounds import SetupBackgroundsStep
from .step_85_check_optional_tools import CheckOptionalToolsStep
from .step_90_set_default_shell import SetDefaultShellStep

__all__ = [
    "InstallPackagesStep",
    "InstallOhMyZshStep",
    "InstallZshPluginsStep",
    "InstallNerdFontStep",
    "BackupDotfilesStep",
    "InstallDotfilesStep",
    "SetupBackgroundsStep",
    "CheckOptionalToolsStep",
    "SetDefaultShellStep",
]

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .context import HostEnvironment, InstallContext, InstallPlan
from .errors import InstallerError
from .lib.command import Runner, run_cmd
from .lib.distro import OS_RELEASE_PATH, detect_distribution
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import PipelineResult, run_pipeline
from .prompts import PresetPrompter, Prompter, RichPrompter, decide_plan
from .settings import DOTFILES_METHODS, PROFILES, WALLPAPER_BACKENDS, Settings, load_settings
from .steps import (
    BackupDotfilesStep,
    CheckOptionalToolsStep,
    InstallDotfilesStep,
    InstallNerdFontStep,
    InstallOhMyZshStep,
    InstallPackagesStep,
    InstallZshPluginsStep,
    SetDefaultShellStep,
    SetupBackgroundsStep,
)
from .wallpaper import WallpaperRotator, detect_setter

logger = logging.getLogger(__name__)


def build_steps():
    return [
        InstallPackagesStep(),
        InstallOhMyZshStep(),
        InstallZshPluginsStep(),
        InstallNerdFontStep(),
        BackupDotfilesStep(),
        InstallDotfilesStep(),
        SetupBackgroundsStep(),
        CheckOptionalToolsStep(),
        SetDefaultShellStep(),
    ]


def _log_next_steps(ctx: InstallContext) -> None:
    notes = [
        "Log out and log back in for shell changes to take effect",
        "Run 'p10k configure' to configure powerlevel10k after logging in",
    ]
    if ctx.plan.dotfiles_method == "bare":
        notes.append(f"Manage your dotfiles with: alias dotfiles='git --git-dir={ctx.git_dir}/ --work-tree=$HOME'")
    if ctx.profile == "desktop":
        notes.append("Update username in ~/.config/autostart/random-wallpaper.desktop if needed")
        notes.append("Some packages like niri and noctalia may need manual installation")
    else:
        notes.append("Your neovim config (LazyVim) will auto-install plugins on first run")

    logger.info("Next steps:")
    for i, note in enumerate(notes, 1):
        logger.info("  %d. %s", i, note)


def run(
    *,
    settings: Settings,
    plan: InstallPlan,
    env: Optional[HostEnvironment] = None,
    runner: Runner = run_cmd,
    os_release_path: str = OS_RELEASE_PATH,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Detect the distribution once, then run every step against a frozen context."""

    logger.info("Starting dotfiles installation (%s profile)...", settings.profile)

    distro = detect_distribution(os_release_path)
    logger.info("Detected distribution: %s", distro.value)

    ctx = InstallContext(
        settings=settings,
        plan=plan,
        distro=distro,
        env=env or HostEnvironment.from_environ(),
        run=runner,
    )

    result = run_pipeline(ctx=ctx, steps=build_steps(), start_at=start_at, stop_after=stop_after)
    logger.debug("Ran steps: %s; skipped: %s", ", ".join(result.ran_steps), ", ".join(result.skipped_steps))

    logger.info("Installation complete!")
    _log_next_steps(ctx)
    return result


def rotate_wallpaper(settings: Settings, *, runner: Runner = run_cmd) -> Path:
    picture_dir = Path(settings.wallpaper_dir).expanduser()
    setter = detect_setter(settings.wallpaper_backend, run=runner, dry_run=settings.dry_run)
    return WallpaperRotator(picture_dir, setter).rotate()


def _settings_from_args(args: argparse.Namespace) -> Settings:
    return load_settings(args.config).with_overrides(
        profile=getattr(args, "profile", None),
        dotfiles_method=getattr(args, "method", None),
        install_font=getattr(args, "font", None),
        dry_run=True if getattr(args, "dry_run", False) else None,
        assume_yes=True if getattr(args, "yes", False) else None,
        wallpaper_dir=getattr(args, "dir", None),
        wallpaper_backend=getattr(args, "backend", None),
    )


def _cmd_install(args: argparse.Namespace) -> int:
    settings = _settings_from_args(args)
    prompter: Prompter = PresetPrompter(answer=True) if settings.assume_yes else RichPrompter()

    plan = decide_plan(settings, prompter)
    if not plan.proceed:
        logger.info("Installation cancelled")
        return 0

    run(settings=settings, plan=plan, start_at=args.start_at, stop_after=args.stop_after)
    return 0


def _cmd_wallpaper(args: argparse.Namespace) -> int:
    rotate_wallpaper(_settings_from_args(args))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="dotfiles-installer",
        description="Bootstrap a machine: packages, zsh, dotfiles; or rotate the wallpaper",
    )
    p.add_argument("--config", default=None, help="Path to settings YAML (default ~/.config/dotfiles-installer/config.yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file")
    p.add_argument("-v", "--verbose", action="store_true", help="Show debug output on the console")
    p.add_argument("--dry-run", action="store_true", help="Log commands without executing them")
    sub = p.add_subparsers(dest="command")

    inst = sub.add_parser("install", help="run the bootstrap (default)")
    inst.add_argument("--profile", choices=PROFILES, default=None, help="desktop (default) or server")
    inst.add_argument("--method", choices=DOTFILES_METHODS, default=None, help="Dotfiles method (server asks if unset)")
    inst.add_argument("--font", action=argparse.BooleanOptionalAction, default=None, help="Install the Nerd Font")
    inst.add_argument("-y", "--yes", action="store_true", help="Answer yes to every confirmation")
    inst.add_argument("--start-at", default=None, help="Start at step_id (e.g. 70_install_dotfiles)")
    inst.add_argument("--stop-after", default=None, help="Stop after step_id")
    inst.set_defaults(func=_cmd_install)

    wall = sub.add_parser("wallpaper", help="pick a random wallpaper and apply it")
    wall.add_argument("--dir", default=None, help="Picture directory (default ~/backgrounds)")
    wall.add_argument("--backend", choices=WALLPAPER_BACKENDS, default=None, help="Wallpaper mechanism")
    wall.set_defaults(func=_cmd_wallpaper)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)
    args = parser.parse_args(argv)
    if args.command is None:
        args = parser.parse_args([*argv, "install"])

    configure_logging(log_path=args.log, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        return args.func(args)
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 130
    except (InstallerError, ValueError, FileNotFoundError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

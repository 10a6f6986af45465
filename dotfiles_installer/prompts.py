"""Interaction boundary.

Steps never ask questions. Every question is asked once, up front, through a
Prompter, and the answers are frozen into an InstallPlan.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Protocol, Sequence

from rich.console import Console
from rich.prompt import Confirm, Prompt

from .context import InstallPlan
from .settings import Settings

logger = logging.getLogger(__name__)


class Prompter(Protocol):
    def confirm(self, question: str, *, default: bool = False) -> bool:
        ...

    def choose(self, question: str, choices: Sequence[str], *, default: str) -> str:
        ...


class RichPrompter:
    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def confirm(self, question: str, *, default: bool = False) -> bool:
        return Confirm.ask(question, default=default, console=self.console)

    def choose(self, question: str, choices: Sequence[str], *, default: str) -> str:
        return Prompt.ask(question, choices=list(choices), default=default, console=self.console)


class PresetPrompter:
    """Non-interactive answers: `--yes` runs and tests."""

    def __init__(self, answer: bool = True, choices: Optional[Dict[str, str]] = None) -> None:
        self.answer = answer
        self.choices = choices or {}
        self.asked: list[str] = []

    def confirm(self, question: str, *, default: bool = False) -> bool:
        self.asked.append(question)
        return self.answer

    def choose(self, question: str, choices: Sequence[str], *, default: str) -> str:
        self.asked.append(question)
        choice = self.choices.get(question, default)
        if choice not in choices:
            raise ValueError(f"Preset answer {choice!r} not in {list(choices)}")
        return choice


SERVER_SUMMARY = """This will install:
  - git, zsh, neovim, and essential tools
  - oh-my-zsh with plugins
  - powerlevel10k theme
  - .zshrc, .p10k.zsh, and nvim config"""


def decide_plan(settings: Settings, prompter: Prompter) -> InstallPlan:
    """Turn settings plus answers into a plan. Settings that are set are never asked about."""

    if settings.profile == "desktop":
        # copy only carries the server's managed paths
        if settings.dotfiles_method == "copy":
            raise ValueError("Dotfiles method 'copy' is only available with the server profile")
        return InstallPlan(
            proceed=True,
            dotfiles_method="bare",
            install_font=True if settings.install_font is None else settings.install_font,
        )

    for line in SERVER_SUMMARY.splitlines():
        logger.info(line)
    if not prompter.confirm("Continue with installation?", default=False):
        return InstallPlan(proceed=False)

    method = settings.dotfiles_method or prompter.choose(
        "Dotfiles method: copy (recommended for servers) or bare (full git tracking)",
        ["copy", "bare"],
        default="copy",
    )

    install_font = settings.install_font
    if install_font is None:
        install_font = prompter.confirm(
            "Install Nerd Font? (recommended if your SSH terminal supports it)",
            default=False,
        )

    return InstallPlan(proceed=True, dotfiles_method=method, install_font=install_font)

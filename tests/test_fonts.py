from __future__ import annotations

import logging

import pytest

from dotfiles_installer.context import InstallPlan
from dotfiles_installer.errors import CommandError
from dotfiles_installer.lib.fonts import NERD_FONT_URL, install_nerd_font
from dotfiles_installer.steps import InstallNerdFontStep

from .conftest import make_tool


def test_skips_when_nerd_font_present(runner, tmp_path):
    fonts = tmp_path / "fonts"
    fonts.mkdir()
    (fonts / "JetBrainsMonoNerdFont-Regular.ttf").write_bytes(b"\0")
    assert install_nerd_font(fonts, run=runner, path=str(tmp_path)) is False
    assert runner.calls == []


def test_downloads_and_extracts(runner, tmp_path, bin_dir):
    make_tool(bin_dir, "fc-cache")
    fonts = tmp_path / "fonts"

    assert install_nerd_font(fonts, run=runner, path=str(bin_dir)) is True

    wget, unzip, fc = runner.calls
    assert wget[:3] == ["wget", "-q", NERD_FONT_URL]
    assert wget[-1].endswith("JetBrainsMono.zip")
    assert unzip[:3] == ["unzip", "-q", "-o"]
    assert unzip[-2:] == ["-d", str(fonts)]
    assert fc == ["fc-cache", "-f", str(fonts)]
    assert fonts.is_dir()


def test_no_fc_cache_is_fine(runner, tmp_path, bin_dir):
    install_nerd_font(tmp_path / "fonts", run=runner, path=str(bin_dir))
    assert [c[0] for c in runner.calls] == ["wget", "unzip"]


def test_step_respects_plan(make_ctx):
    step = InstallNerdFontStep()
    assert step.applies(make_ctx(plan=InstallPlan(install_font=True)))
    assert not step.applies(make_ctx(plan=InstallPlan(install_font=False)))


def test_download_failure_fatal_on_desktop(make_ctx, runner):
    runner.script(lambda argv: argv[0] == "wget", (4, "network failure"))
    with pytest.raises(CommandError):
        InstallNerdFontStep().run(make_ctx(profile="desktop"))


def test_download_failure_advisory_on_server(make_ctx, runner, caplog):
    runner.script(lambda argv: argv[0] == "wget", (4, "network failure"))
    with caplog.at_level(logging.WARNING):
        InstallNerdFontStep().run(make_ctx(profile="server"))
    assert "optional for servers" in caplog.text

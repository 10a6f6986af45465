from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

import yaml


def _manifest_dir() -> Path:
    # dotfiles_installer/lib/manifests.py -> dotfiles_installer/manifests
    return Path(__file__).resolve().parents[1] / "manifests"


def load_yaml_rel(rel_path: str) -> Dict[str, Any]:
    """Load a YAML manifest shipped inside the package."""

    p = _manifest_dir() / rel_path.lstrip("/")
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Manifest must be a mapping/dict: {p}")
    return data


def _dedup(items: List[str]) -> List[str]:
    out: List[str] = []
    for item in items:
        if item and item not in out:
            out.append(item)
    return out


def package_list(profile: str, family: str) -> List[str]:
    """Ordered package names for a profile and package family (apt/pacman/dnf)."""

    manifest = load_yaml_rel("packages.yaml")
    profiles = manifest.get("profiles") or {}
    prof = profiles.get(profile)
    if not isinstance(prof, dict):
        raise ValueError(f"packages.yaml: unknown profile {profile!r}")
    pkgs = prof.get(family) or []
    if not isinstance(pkgs, list):
        raise ValueError(f"packages.yaml: {profile}.{family} must be a list")
    return _dedup([str(p).strip() for p in pkgs])


def extras(profile: str) -> Dict[str, Any]:
    manifest = load_yaml_rel("packages.yaml")
    ex = (manifest.get("extras") or {}).get(profile) or {}
    if not isinstance(ex, dict):
        raise ValueError(f"packages.yaml: extras.{profile} must be a mapping")
    return ex


def optional_tools(profile: str) -> Dict[str, str]:
    """Tool name -> guidance URL for tools that are reported, never installed."""

    manifest = load_yaml_rel("packages.yaml")
    tools = (manifest.get("optional_tools") or {}).get(profile) or {}
    if not isinstance(tools, dict):
        raise ValueError(f"packages.yaml: optional_tools.{profile} must be a mapping")
    return {str(k): str(v) for k, v in tools.items()}


@dataclass(frozen=True)
class ShellComponent:
    name: str
    url: str
    kind: str  # "plugin" | "theme"


@dataclass(frozen=True)
class ShellManifest:
    framework_url: str
    components: List[ShellComponent]


def load_shell_manifest() -> ShellManifest:
    raw = load_yaml_rel("shell.yaml")
    framework = raw.get("framework") or {}
    url = str(framework.get("url") or "").strip()
    if not url:
        raise ValueError("shell.yaml: framework.url is required")

    components: List[ShellComponent] = []
    for kind, key in (("plugin", "plugins"), ("theme", "themes")):
        for entry in raw.get(key) or []:
            if not isinstance(entry, dict) or not entry.get("name") or not entry.get("url"):
                raise ValueError(f"shell.yaml: every {kind} needs name and url")
            components.append(ShellComponent(name=str(entry["name"]), url=str(entry["url"]), kind=kind))
    return ShellManifest(framework_url=url, components=components)

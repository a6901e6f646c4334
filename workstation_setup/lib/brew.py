from __future__ import annotations

import logging
from typing import Optional, Tuple

from .host import Host, expand

logger = logging.getLogger(__name__)

INSTALL = "install"
FORCE_UNINSTALL = "uninstall_force"
HOLD_STALE = "hold_stale"

DEFAULT_PREFIX = "/opt/homebrew"


def plan_formula(*, registered: bool) -> Tuple[str, ...]:
    """Actions needed to converge a CLI tool (formula)."""

    return () if registered else (INSTALL,)


def plan_cask(*, app_present: bool, registered: bool, reinstall_stale: bool = True) -> Tuple[str, ...]:
    """Actions needed to converge a GUI app (cask).

    The bundle on disk is the source of truth. A registration without a
    bundle is stale and is force-removed before reinstalling, unless the
    caller opted out of touching stale casks.
    """

    if app_present:
        return ()
    if registered:
        if not reinstall_stale:
            return (HOLD_STALE,)
        return (FORCE_UNINSTALL, INSTALL)
    return (INSTALL,)


def resolve_prefix(host: Host, configured: Optional[str] = None) -> str:
    return host.getenv("HOMEBREW_PREFIX") or configured or DEFAULT_PREFIX


def shellenv_line(prefix: str) -> str:
    return f'eval "$({prefix}/bin/brew shellenv)"'


def brew_on_path(host: Host) -> bool:
    return host.which("brew") is not None


def install_homebrew(host: Host, *, script_url: str) -> None:
    """Fetch and run the official installer non-interactively."""

    script = host.run(["curl", "-fsSL", script_url]).stdout
    host.run(["/bin/bash", "-c", script], env={"NONINTERACTIVE": "1"}, interactive=True)


def activate_shellenv(host: Host, *, prefix: str, profile: str) -> bool:
    """Persist brew's shell integration and apply it to this session.

    Returns True if the profile was modified.
    """

    line = shellenv_line(prefix)
    profile_path = expand(host, profile)
    existing = host.read_text(profile_path) if host.exists(profile_path) else ""
    changed = False
    if line not in existing.splitlines():
        prefix_nl = "" if (not existing or existing.endswith("\n")) else "\n"
        host.append_text(profile_path, f"{prefix_nl}{line}\n")
        changed = True
        logger.info("Added Homebrew shellenv to %s", profile_path)

    host.setenv("HOMEBREW_PREFIX", prefix)
    host.setenv("HOMEBREW_CELLAR", f"{prefix}/Cellar")
    host.setenv("HOMEBREW_REPOSITORY", prefix)
    path = host.getenv("PATH") or ""
    wanted = [f"{prefix}/bin", f"{prefix}/sbin"]
    parts = [p for p in path.split(":") if p and p not in wanted]
    host.setenv("PATH", ":".join(wanted + parts))
    return changed


def brew_update(host: Host) -> None:
    host.run(["brew", "update"], interactive=True)


def brew_upgrade(host: Host) -> None:
    host.run(["brew", "upgrade"], interactive=True)


def formula_registered(host: Host, name: str) -> bool:
    return host.probe(["brew", "list", name]).ok


def cask_registered(host: Host, name: str) -> bool:
    return host.probe(["brew", "list", "--cask", name]).ok


def install_formula(host: Host, name: str) -> None:
    host.run(["brew", "install", name], interactive=True)


def install_cask(host: Host, name: str) -> None:
    host.run(["brew", "install", "--cask", name], interactive=True)


def uninstall_cask_force(host: Host, name: str) -> None:
    host.run(["brew", "uninstall", "--cask", "--force", name], interactive=True)


def formula_prefix(host: Host, name: str) -> Optional[str]:
    r = host.probe(["brew", "--prefix", name])
    out = r.stdout.strip()
    return out if r.ok and out else None

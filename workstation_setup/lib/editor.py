from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Set

from .host import Host, expand

logger = logging.getLogger(__name__)

# Location of the `code` launcher inside the VS Code bundle.
BUNDLE_CLI = "Contents/Resources/app/bin/code"


def find_code_cli(
    host: Host,
    *,
    cli: str = "code",
    app_name: str = "Visual Studio Code",
    app_dirs: Sequence[str] = (),
) -> Optional[str]:
    found = host.which(cli)
    if found:
        return found
    for d in app_dirs:
        candidate = expand(host, d) / f"{app_name}.app" / BUNDLE_CLI
        if host.exists(candidate):
            return str(candidate)
    return None


def installed_extensions(host: Host, code_cli: str) -> Set[str]:
    r = host.probe([code_cli, "--list-extensions"])
    if not r.ok:
        return set()
    return {line.strip().lower() for line in r.stdout.splitlines() if line.strip()}


def missing_extensions(wanted: Iterable[str], installed: Set[str]) -> List[str]:
    out: List[str] = []
    for ext in wanted:
        if ext.lower() not in installed and ext not in out:
            out.append(ext)
    return out


def install_extension(host: Host, code_cli: str, extension_id: str) -> None:
    host.run([code_cli, "--install-extension", extension_id])

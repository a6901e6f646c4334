from __future__ import annotations

import logging
import shlex
from typing import Optional

from .brew import formula_prefix
from .host import Host, expand

logger = logging.getLogger(__name__)


def nvm_script(host: Host) -> Optional[str]:
    """Path of nvm.sh from the Homebrew nvm formula, if it is installed."""

    prefix = formula_prefix(host, "nvm")
    if not prefix:
        return None
    script = f"{prefix}/nvm.sh"
    return script if host.exists(script) else None


def install_node(host: Host, *, nvm_sh: str, nvm_dir: str, version: str = "--lts") -> None:
    """nvm is a shell function, so it has to be sourced and run in one bash."""

    nvm_home = expand(host, nvm_dir)
    host.make_dir(nvm_home)
    script = "; ".join(
        [
            f"export NVM_DIR={shlex.quote(str(nvm_home))}",
            f"source {shlex.quote(nvm_sh)}",
            f"nvm install {shlex.quote(version)}",
        ]
    )
    host.run(["/bin/bash", "-c", script], interactive=True)

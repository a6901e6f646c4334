from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import SetupConfig
from ..lib.brew import activate_shellenv, brew_on_path, install_homebrew, resolve_prefix
from ..lib.host import Host
from ..state_store import record_action, record_decision

logger = logging.getLogger(__name__)


class BootstrapHomebrewStep:
    step_id = "10_bootstrap_homebrew"

    def run(self, state: Dict[str, Any], host: Host) -> Dict[str, Any]:
        cfg = SetupConfig(state.get("config") or {})
        prefix = resolve_prefix(host, cfg.homebrew_prefix)
        record_decision(state, "homebrew_prefix", prefix)

        logger.info("Checking for Homebrew...")
        if brew_on_path(host):
            logger.info("Homebrew already installed.")
            return state

        if host.exists(f"{prefix}/bin/brew"):
            # Installed but this shell never sourced it.
            logger.info("Homebrew found at %s but not on PATH", prefix)
        else:
            logger.info("Installing Homebrew...")
            install_homebrew(host, script_url=cfg.homebrew_install_url)
            record_action(state, self.step_id, "installed homebrew")

        if activate_shellenv(host, prefix=prefix, profile=cfg.shell_profile):
            record_action(state, self.step_id, f"added shellenv to {cfg.shell_profile}")
        return state

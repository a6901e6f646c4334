from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import SetupConfig
from ..lib.brew import INSTALL, formula_registered, install_formula, plan_formula
from ..lib.host import Host
from ..state_store import record_action, record_decision

logger = logging.getLogger(__name__)


class InstallCliToolsStep:
    step_id = "20_install_cli_tools"

    def run(self, state: Dict[str, Any], host: Host) -> Dict[str, Any]:
        cfg = SetupConfig(state.get("config") or {})

        logger.info("Installing command-line tools...")
        installed: list[str] = []
        for name in cfg.cli_tools:
            actions = plan_formula(registered=formula_registered(host, name))
            if not actions:
                logger.info("%s is already installed. Skipping.", name)
                continue
            if INSTALL in actions:
                logger.info("Installing %s...", name)
                install_formula(host, name)
                record_action(state, self.step_id, f"brew install {name}")
                installed.append(name)

        record_decision(state, "cli_tools_installed", installed)
        logger.info("Command-line tools installed (%d new)", len(installed))
        return state

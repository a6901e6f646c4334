from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import SetupConfig
from ..lib.host import Host
from ..lib.nvm import install_node, nvm_script
from ..state_store import record_action

logger = logging.getLogger(__name__)


class SetupNodeStep:
    step_id = "40_setup_node"

    def run(self, state: Dict[str, Any], host: Host) -> Dict[str, Any]:
        cfg = SetupConfig(state.get("config") or {})

        logger.info("Setting up NVM (Node Version Manager)...")
        nvm_sh = nvm_script(host)
        if not nvm_sh:
            if host.dry_run:
                logger.info("Would run nvm install %s once nvm is installed", cfg.node_version)
                return state
            raise RuntimeError("nvm.sh not found; is the nvm formula installed?")

        install_node(host, nvm_sh=nvm_sh, nvm_dir=cfg.nvm_dir, version=cfg.node_version)
        record_action(state, self.step_id, f"nvm install {cfg.node_version}")
        logger.info("NVM setup complete!")
        return state

from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import SetupConfig
from ..lib.brew import brew_update, brew_upgrade
from ..lib.host import Host
from ..state_store import record_action

logger = logging.getLogger(__name__)


class UpdateHomebrewStep:
    step_id = "15_update_homebrew"

    def run(self, state: Dict[str, Any], host: Host) -> Dict[str, Any]:
        cfg = SetupConfig(state.get("config") or {})
        if not cfg.homebrew_update:
            logger.info("Homebrew update disabled by config")
            return state

        logger.info("Updating Homebrew...")
        brew_update(host)
        brew_upgrade(host)
        record_action(state, self.step_id, "brew update && brew upgrade")
        return state

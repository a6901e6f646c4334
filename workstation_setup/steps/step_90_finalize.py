from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.host import Host
from ..state_store import record_action

logger = logging.getLogger(__name__)


class FinalizeStep:
    step_id = "90_finalize"

    def run(self, state: Dict[str, Any], host: Host) -> Dict[str, Any]:
        logger.info("Finalize summary: %s", (state.get("execution") or {}).get("decisions") or {})
        host.show("Setup complete! Restart your terminal.")
        record_action(state, self.step_id, "completion notice")
        return state

from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import SetupConfig
from ..lib.editor import find_code_cli, install_extension, installed_extensions, missing_extensions
from ..lib.host import Host
from ..state_store import record_action

logger = logging.getLogger(__name__)


class InstallEditorExtensionsStep:
    step_id = "35_install_editor_extensions"

    def run(self, state: Dict[str, Any], host: Host) -> Dict[str, Any]:
        cfg = SetupConfig(state.get("config") or {})
        wanted = cfg.editor_extensions
        if not wanted:
            return state

        code_cli = find_code_cli(
            host,
            cli=cfg.editor_cli,
            app_name=cfg.editor_app,
            app_dirs=cfg.applications_dirs,
        )
        if not code_cli:
            if host.dry_run:
                logger.info("Would install extensions once %s is available: %s", cfg.editor_cli, ", ".join(wanted))
                return state
            raise RuntimeError(f"Editor CLI '{cfg.editor_cli}' not found; is {cfg.editor_app} installed?")

        for ext in missing_extensions(wanted, installed_extensions(host, code_cli)):
            logger.info("Installing editor extension %s", ext)
            install_extension(host, code_cli, ext)
            record_action(state, self.step_id, f"extension {ext}")
        return state

from __future__ import annotations

import logging
from typing import Any, Dict, Sequence

from ..config import CaskApp, SetupConfig
from ..lib.brew import (
    FORCE_UNINSTALL,
    HOLD_STALE,
    INSTALL,
    cask_registered,
    install_cask,
    plan_cask,
    uninstall_cask_force,
)
from ..lib.host import Host, expand
from ..state_store import record_action, record_decision, record_warning

logger = logging.getLogger(__name__)


def app_bundle_present(host: Host, app: CaskApp, app_dirs: Sequence[str]) -> bool:
    for d in app_dirs:
        if host.exists(expand(host, d) / f"{app.app}.app"):
            return True
    return False


class InstallAppsStep:
    step_id = "30_install_apps"

    def run(self, state: Dict[str, Any], host: Host) -> Dict[str, Any]:
        cfg = SetupConfig(state.get("config") or {})
        app_dirs = cfg.applications_dirs

        logger.info("Installing essential applications...")
        installed: list[str] = []
        for app in cfg.cask_apps:
            present = app_bundle_present(host, app, app_dirs)
            # Only ask Homebrew when the bundle is missing.
            registered = False if present else cask_registered(host, app.name)
            actions = plan_cask(
                app_present=present,
                registered=registered,
                reinstall_stale=cfg.reinstall_stale_casks,
            )

            if not actions:
                logger.info("%s is already installed. Skipping.", app.app)
                continue

            if HOLD_STALE in actions:
                logger.warning("%s is registered in Homebrew but missing from disk; leaving it alone", app.name)
                record_warning(state, {"cask": app.name, "reason": "stale_registration_kept"})
                continue

            if FORCE_UNINSTALL in actions:
                logger.warning("%s is registered in Homebrew but missing from disk. Forcing uninstall...", app.name)
                uninstall_cask_force(host, app.name)
                record_action(state, self.step_id, f"brew uninstall --cask --force {app.name}")

            if INSTALL in actions:
                logger.info("Installing %s...", app.name)
                install_cask(host, app.name)
                record_action(state, self.step_id, f"brew install --cask {app.name}")
                installed.append(app.name)

        record_decision(state, "casks_installed", installed)
        logger.info("Essential applications installed (%d new)", len(installed))
        return state

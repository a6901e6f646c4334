from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..config import SetupConfig
from ..errors import InputValidationError
from ..lib.desktop import play_sound
from ..lib.git import git_config_set
from ..lib.host import Host
from ..state_store import record_action, record_decision

logger = logging.getLogger(__name__)


def _ask(host: Host, preset: Optional[str], message: str, label: str) -> str:
    value = preset if preset is not None else host.prompt(message)
    value = (value or "").strip()
    if not value:
        raise InputValidationError(f"{label} cannot be empty!")
    return value


class ConfigureGitStep:
    step_id = "50_configure_git"

    def run(self, state: Dict[str, Any], host: Host) -> Dict[str, Any]:
        cfg = SetupConfig(state.get("config") or {})

        if cfg.git_user_name is None or cfg.git_user_email is None:
            play_sound(host, sound=cfg.sound, player=cfg.sound_player)

        # Both answers are validated before anything is written.
        name = _ask(host, cfg.git_user_name, "Enter your Git username: ", "Git username")
        email = _ask(host, cfg.git_user_email, "Enter your Git email: ", "Git email")

        settings = [
            ("user.name", name),
            ("user.email", email),
            ("core.editor", cfg.git_editor),
            ("init.defaultBranch", cfg.git_default_branch),
        ]
        for key, value in settings:
            git_config_set(host, key, value)
            record_action(state, self.step_id, f"git config --global {key}")

        record_decision(state, "git_identity", {"name": name, "email": email})
        logger.info("Git configured!")
        return state

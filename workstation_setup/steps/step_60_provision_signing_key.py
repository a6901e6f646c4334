from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import SetupConfig
from ..errors import SigningKeyError
from ..lib.desktop import copy_to_clipboard, play_sound
from ..lib.git import git_config_get, git_config_set
from ..lib.gpg import KeySpec, export_public_key, first_secret_key_id, generate_key
from ..lib.host import Host, expand
from ..state_store import record_action, record_decision

logger = logging.getLogger(__name__)


def key_spec_from_git(host: Host, cfg: SetupConfig, state: Dict[str, Any]) -> KeySpec:
    """Key identity comes from the git identity written by the previous step.

    In dry-run nothing was written, so the identity recorded in state is used.
    """

    recorded = ((state.get("execution") or {}).get("decisions") or {}).get("git_identity") or {}
    name = git_config_get(host, "user.name") or recorded.get("name")
    email = git_config_get(host, "user.email") or recorded.get("email")
    if not name or not email:
        raise SigningKeyError("git user.name/user.email must be configured before generating a key")

    sk = cfg.signing_key
    return KeySpec(
        name=name,
        email=email,
        key_type=str(sk.get("key_type") or "RSA"),
        key_length=int(sk.get("key_length") or 4096),
        key_usage=str(sk.get("key_usage") or "sign"),
        expire_date=str(sk.get("expire_date", "0")),
    )


class ProvisionSigningKeyStep:
    step_id = "60_provision_signing_key"

    def _publish(self, host: Host, cfg: SetupConfig, key_id: str) -> None:
        armored = export_public_key(host, key_id)
        logger.info("Copying public key to clipboard...")
        copy_to_clipboard(host, armored, tool=cfg.clipboard_tool)
        logger.info("Public key copied to clipboard! (ID: %s)", key_id)
        host.show("(Here is the same key, displayed in terminal for reference:)")
        host.show(armored.rstrip("\n"))

    def run(self, state: Dict[str, Any], host: Host) -> Dict[str, Any]:
        cfg = SetupConfig(state.get("config") or {})

        logger.info("Checking for existing GPG key...")
        key_id = first_secret_key_id(host)

        if key_id:
            logger.info("Found existing secret key %s", key_id)
        else:
            logger.info("No GPG key found. Generating a new one...")
            spec = key_spec_from_git(host, cfg, state)
            generate_key(host, spec, descriptor_path=expand(host, cfg.key_descriptor_path))
            record_action(state, self.step_id, "generated signing key")

            key_id = first_secret_key_id(host)
            if not key_id:
                if host.dry_run:
                    logger.info("Would export the new key and enable commit signing")
                    return state
                raise SigningKeyError("No secret key found after generation")

        record_decision(state, "signing_key_id", key_id)
        self._publish(host, cfg, key_id)

        if cfg.wait_for_confirmation:
            if cfg.key_registration_url:
                host.show("IMPORTANT: Please add this key to your Git host following the instructions here:")
                host.show(cfg.key_registration_url)
            play_sound(host, sound=cfg.sound, player=cfg.sound_player)
            host.pause("Once you've added your key, press any key to continue...")

        current = git_config_get(host, "user.signingkey")
        signing = git_config_get(host, "commit.gpgsign")
        if current != key_id:
            git_config_set(host, "user.signingkey", key_id)
            record_action(state, self.step_id, "git config --global user.signingkey")
        if signing != "true":
            git_config_set(host, "commit.gpgsign", "true")
            record_action(state, self.step_id, "git config --global commit.gpgsign")

        logger.info("Git commit signing configured with key ID: %s", key_id)
        return state

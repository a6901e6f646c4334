from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .manifests import load_default_profile, load_yaml_file, merge_config


@dataclass(frozen=True)
class CaskApp:
    name: str
    app: str


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"config.{key} must be a mapping")
    return value


def _str_list(raw: Dict[str, Any], key: str) -> List[str]:
    value = raw.get(key) or []
    if not isinstance(value, list):
        raise ValueError(f"config.{key} must be a list")
    return [str(v).strip() for v in value if str(v).strip()]


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


@dataclass(frozen=True)
class SetupConfig:
    raw: Dict[str, Any]

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))

    # Homebrew

    @property
    def homebrew_prefix(self) -> Optional[str]:
        return _section(self.raw, "homebrew").get("prefix")

    @property
    def homebrew_install_url(self) -> str:
        return str(
            _section(self.raw, "homebrew").get("install_script_url")
            or "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
        )

    @property
    def shell_profile(self) -> str:
        return str(_section(self.raw, "homebrew").get("shell_profile") or "~/.zprofile")

    @property
    def homebrew_update(self) -> bool:
        return bool(_section(self.raw, "homebrew").get("update", True))

    @property
    def reinstall_stale_casks(self) -> bool:
        return bool(_section(self.raw, "homebrew").get("reinstall_stale_casks", True))

    # Packages

    @property
    def cli_tools(self) -> List[str]:
        return _str_list(self.raw, "cli_tools")

    @property
    def applications_dirs(self) -> List[str]:
        return _str_list(self.raw, "applications_dirs") or ["/Applications", "~/Applications"]

    @property
    def cask_apps(self) -> List[CaskApp]:
        items = self.raw.get("cask_apps") or []
        if not isinstance(items, list):
            raise ValueError("config.cask_apps must be a list")
        apps: List[CaskApp] = []
        for item in items:
            if isinstance(item, str):
                apps.append(CaskApp(name=item, app=item))
            elif isinstance(item, dict) and item.get("name"):
                name = str(item["name"]).strip()
                apps.append(CaskApp(name=name, app=str(item.get("app") or name).strip()))
            else:
                raise ValueError(f"Invalid cask entry: {item!r}")
        return apps

    # Editor

    @property
    def editor_cli(self) -> str:
        return str(_section(self.raw, "editor").get("cli") or "code")

    @property
    def editor_app(self) -> str:
        return str(_section(self.raw, "editor").get("app") or "Visual Studio Code")

    @property
    def editor_extensions(self) -> List[str]:
        return _str_list(_section(self.raw, "editor"), "extensions")

    # Node

    @property
    def nvm_dir(self) -> str:
        return str(_section(self.raw, "nvm").get("dir") or "~/.nvm")

    @property
    def node_version(self) -> str:
        return str(_section(self.raw, "nvm").get("node_version") or "--lts")

    # Git

    @property
    def git_user_name(self) -> Optional[str]:
        return _optional_str(_section(self.raw, "git").get("user_name"))

    @property
    def git_user_email(self) -> Optional[str]:
        return _optional_str(_section(self.raw, "git").get("user_email"))

    @property
    def git_editor(self) -> str:
        return str(_section(self.raw, "git").get("editor") or "code --wait")

    @property
    def git_default_branch(self) -> str:
        return str(_section(self.raw, "git").get("default_branch") or "main")

    # Signing key

    @property
    def signing_key(self) -> Dict[str, Any]:
        return _section(self.raw, "signing_key")

    @property
    def key_descriptor_path(self) -> str:
        return str(self.signing_key.get("descriptor_path") or "~/.gnupg/gpg-key-config")

    @property
    def key_registration_url(self) -> Optional[str]:
        return self.signing_key.get("registration_url")

    @property
    def wait_for_confirmation(self) -> bool:
        return bool(self.signing_key.get("wait_for_confirmation", True))

    # Notifications

    @property
    def sound(self) -> str:
        return str(_section(self.raw, "notify").get("sound") or "")

    @property
    def sound_player(self) -> str:
        return str(_section(self.raw, "notify").get("player") or "afplay")

    @property
    def clipboard_tool(self) -> str:
        return str(_section(self.raw, "notify").get("clipboard") or "pbcopy")


def load_setup_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Packaged defaults, optionally overlaid by a user YAML file."""

    raw = load_default_profile()
    if path:
        p = Path(path).expanduser()
        if not p.exists():
            raise FileNotFoundError(path)
        if p.suffix.lower() not in {".yaml", ".yml"}:
            raise ValueError("setup config must be YAML")
        raw = merge_config(raw, load_yaml_file(p))
    return raw

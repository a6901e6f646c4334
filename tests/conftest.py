"""
Shared test fixtures and configuration.

FakeHost simulates a Mac closely enough for the setup steps: Homebrew
formulae and casks, application bundles, global git config, the GPG
keyring, prompts and the clipboard. Nothing touches the real machine.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pytest

from workstation_setup.config import load_setup_config
from workstation_setup.lib.command import CmdResult, CommandError
from workstation_setup.lib.host import expand
from workstation_setup.manifests import merge_config
from workstation_setup.state_store import ensure_defaults

FAKE_HOME = "/Users/alice"
NVM_PREFIX = "/opt/homebrew/opt/nvm"
GENERATED_KEY_ID = "3AA5C34371567BD2"

VSCODE_BUNDLE = "/Applications/Visual Studio Code.app"
DEFAULT_CASK_BUNDLES = {
    "google-chrome": ["/Applications/Google Chrome.app"],
    "slack": ["/Applications/Slack.app"],
    "postman": ["/Applications/Postman.app"],
    "visual-studio-code": [VSCODE_BUNDLE, f"{VSCODE_BUNDLE}/Contents/Resources/app/bin/code"],
    "microsoft-office": ["/Applications/Microsoft Office.app"],
}


def _ok(argv: Sequence[str], stdout: str = "") -> CmdResult:
    return CmdResult(argv=list(argv), returncode=0, stdout=stdout, stderr="")


def _fail(argv: Sequence[str], code: int = 1) -> CmdResult:
    return CmdResult(argv=list(argv), returncode=code, stdout="", stderr="error")


class FakeHost:
    def __init__(
        self,
        *,
        brew_installed: bool = True,
        formulae: Iterable[str] = (),
        casks: Iterable[str] = (),
        paths: Iterable[str] = (),
        secret_keys: Iterable[str] = (),
        extensions: Iterable[str] = (),
        answers: Iterable[str] = (),
        fail: Optional[Mapping[tuple, int]] = None,
        dry_run: bool = False,
    ) -> None:
        self.dry_run = dry_run
        self.home = Path(FAKE_HOME)
        self.env: Dict[str, str] = {"PATH": "/usr/bin:/bin"}
        self.paths = set(paths)
        self.files: Dict[str, str] = {}
        self.formulae = set(formulae)
        self.casks = set(casks)
        self.cask_bundles = dict(DEFAULT_CASK_BUNDLES)
        self.extensions = {e.lower() for e in extensions}
        self.git_config: Dict[str, str] = {}
        self.secret_keys: List[str] = list(secret_keys)
        self.answers = list(answers)
        self.fail = dict(fail or {})

        self.commands: List[List[str]] = []
        self.probes: List[List[str]] = []
        self.prompts: List[str] = []
        self.shown: List[str] = []
        self.descriptors: List[str] = []
        self.clipboard: Optional[str] = None
        self.pauses = 0
        self.node_installed = False

        if brew_installed:
            self.paths.add("/opt/homebrew/bin/brew")
            self.env["PATH"] = "/opt/homebrew/bin:" + self.env["PATH"]
        for f in self.formulae:
            self._formula_installed(f)

    # ── Host interface ──────────────────────────────────────────────

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        input_text: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        interactive: bool = False,
    ) -> CmdResult:
        argv = list(argv)
        self.commands.append(argv)
        for prefix, code in self.fail.items():
            if tuple(argv[: len(prefix)]) == tuple(prefix):
                if check:
                    raise CommandError(argv, code, "scripted failure")
                return _fail(argv, code)
        if self.dry_run:
            return _ok(argv)
        return self._apply(argv, input_text)

    def probe(self, argv: Sequence[str], *, env: Optional[Mapping[str, str]] = None) -> CmdResult:
        argv = list(argv)
        self.probes.append(argv)
        return self._query(argv)

    def which(self, name: str) -> Optional[str]:
        for d in self.env.get("PATH", "").split(":"):
            candidate = f"{d}/{name}"
            if d and candidate in self.paths:
                return candidate
        return None

    def exists(self, path) -> bool:
        p = str(expand(self, path))
        if p in self.paths or p in self.files:
            return True
        return any(q.startswith(p + "/") for q in list(self.paths) + list(self.files))

    def read_text(self, path) -> str:
        return self.files[str(expand(self, path))]

    def write_text(self, path, text: str, *, mode: Optional[int] = None) -> None:
        if not self.dry_run:
            self.files[str(expand(self, path))] = text

    def append_text(self, path, text: str) -> None:
        if not self.dry_run:
            p = str(expand(self, path))
            self.files[p] = self.files.get(p, "") + text

    def remove(self, path) -> None:
        if not self.dry_run:
            self.files.pop(str(expand(self, path)), None)

    def make_dir(self, path, *, mode: Optional[int] = None) -> None:
        if not self.dry_run:
            self.paths.add(str(expand(self, path)))

    def getenv(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.env.get(key, default)

    def setenv(self, key: str, value: str) -> None:
        self.env[key] = value

    def prompt(self, message: str) -> str:
        self.prompts.append(message)
        return self.answers.pop(0) if self.answers else ""

    def pause(self, message: str) -> None:
        self.pauses += 1

    def show(self, text: str) -> None:
        self.shown.append(text)

    # ── Simulation ──────────────────────────────────────────────────

    def commands_starting(self, *prefix: str) -> List[List[str]]:
        return [c for c in self.commands if tuple(c[: len(prefix)]) == prefix]

    def _formula_installed(self, name: str) -> None:
        self.formulae.add(name)
        if name == "nvm":
            self.paths.add(f"{NVM_PREFIX}/nvm.sh")

    def _apply(self, argv: List[str], input_text: Optional[str]) -> CmdResult:
        head = argv[0]
        if head == "curl":
            return _ok(argv, "#!/bin/bash\necho installing homebrew\n")
        if head == "/bin/bash":
            script = argv[2]
            if "nvm install" in script:
                self.node_installed = True
            else:
                self.paths.add("/opt/homebrew/bin/brew")
            return _ok(argv)
        if head == "brew":
            return self._apply_brew(argv)
        if head == "git" and argv[1:3] == ["config", "--global"]:
            self.git_config[argv[3]] = argv[4]
            return _ok(argv)
        if head == "gpg" and "--gen-key" in argv:
            descriptor = self.files[argv[-1]]
            self.descriptors.append(descriptor)
            self.secret_keys.append(GENERATED_KEY_ID)
            return _ok(argv)
        if head == "gpg" and "--export" in argv:
            key_id = argv[-1]
            return _ok(argv, f"-----BEGIN PGP PUBLIC KEY BLOCK-----\n{key_id}\n-----END PGP PUBLIC KEY BLOCK-----\n")
        if head == "pbcopy":
            self.clipboard = input_text
            return _ok(argv)
        if head.endswith("code") and argv[1] == "--install-extension":
            self.extensions.add(argv[2].lower())
            return _ok(argv)
        return _ok(argv)

    def _apply_brew(self, argv: List[str]) -> CmdResult:
        if argv[1] == "install" and argv[2] == "--cask":
            self.casks.add(argv[3])
            self.paths.update(self.cask_bundles.get(argv[3], []))
        elif argv[1] == "install":
            self._formula_installed(argv[2])
        elif argv[1] == "uninstall" and "--cask" in argv:
            self.casks.discard(argv[-1])
        return _ok(argv)

    def _query(self, argv: List[str]) -> CmdResult:
        head = argv[0]
        if head == "brew":
            if argv[1] == "list" and argv[2] == "--cask":
                return _ok(argv) if argv[3] in self.casks else _fail(argv)
            if argv[1] == "list":
                return _ok(argv) if argv[2] in self.formulae else _fail(argv)
            if argv[1] == "--prefix" and argv[2] == "nvm":
                return _ok(argv, NVM_PREFIX + "\n") if "nvm" in self.formulae else _fail(argv)
        if head == "git" and "--get" in argv:
            value = self.git_config.get(argv[-1])
            return _ok(argv, value + "\n") if value is not None else _fail(argv)
        if head == "gpg" and "--list-secret-keys" in argv:
            lines = []
            for key_id in self.secret_keys:
                lines.append(f"sec:u:4096:1:{key_id}:1700000000:::u:::scESC:::+:::23::0:")
                lines.append(f"uid:u::::1700000000::HASH::alice <alice@example.com>::::::::::0:")
            return _ok(argv, "\n".join(lines) + ("\n" if lines else ""))
        if head.endswith("code") and argv[1] == "--list-extensions":
            return _ok(argv, "\n".join(sorted(self.extensions)) + "\n")
        return _fail(argv, 127)


def make_state(overlay: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    config = load_setup_config()
    if overlay:
        config = merge_config(config, overlay)
    return ensure_defaults({"config": config})


@pytest.fixture
def fake_host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def state() -> Dict[str, Any]:
    return make_state()


@pytest.fixture
def run_paths(tmp_path: Path) -> Dict[str, str]:
    return {
        "state_path": str(tmp_path / "state.json"),
        "log_path": str(tmp_path / "setup.log"),
    }

"""Capability boundary between setup steps and the machine.

Steps never call subprocess, os.environ or input() directly. They talk to a
Host, so the whole plan can run against a scripted fake in tests.

- probe(): read-only query, always executed (also in dry-run), never raises.
- run(): mutating command, only logged in dry-run, raises on failure.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from pathlib import Path
from typing import Mapping, Optional, Protocol, Sequence, Union

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class Host(Protocol):
    dry_run: bool
    home: Path

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        input_text: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        interactive: bool = False,
    ) -> CmdResult:
        ...

    def probe(self, argv: Sequence[str], *, env: Optional[Mapping[str, str]] = None) -> CmdResult:
        ...

    def which(self, name: str) -> Optional[str]:
        ...

    def exists(self, path: PathLike) -> bool:
        ...

    def read_text(self, path: PathLike) -> str:
        ...

    def write_text(self, path: PathLike, text: str, *, mode: Optional[int] = None) -> None:
        ...

    def append_text(self, path: PathLike, text: str) -> None:
        ...

    def remove(self, path: PathLike) -> None:
        ...

    def make_dir(self, path: PathLike, *, mode: Optional[int] = None) -> None:
        ...

    def getenv(self, key: str, default: Optional[str] = None) -> Optional[str]:
        ...

    def setenv(self, key: str, value: str) -> None:
        ...

    def prompt(self, message: str) -> str:
        ...

    def pause(self, message: str) -> None:
        ...

    def show(self, text: str) -> None:
        ...


def expand(host: Host, path: PathLike) -> Path:
    """Expand a leading ~ against the host's home directory."""

    s = str(path)
    if s == "~":
        return host.home
    if s.startswith("~/"):
        return host.home / s[2:]
    return Path(s)


def _read_single_key() -> None:
    if not sys.stdin.isatty():
        sys.stdin.readline()
        return

    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        sys.stdin.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


class LocalHost:
    """The machine this process runs on."""

    def __init__(self, *, dry_run: bool = False, home: Optional[Path] = None) -> None:
        self.dry_run = dry_run
        self.home = home or Path.home()

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        input_text: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        interactive: bool = False,
    ) -> CmdResult:
        return run_cmd(
            argv,
            check=check,
            env=env,
            input_text=input_text,
            capture=not interactive,
            dry_run=self.dry_run,
        )

    def probe(self, argv: Sequence[str], *, env: Optional[Mapping[str, str]] = None) -> CmdResult:
        return run_cmd(argv, check=False, env=env)

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name)

    def exists(self, path: PathLike) -> bool:
        return expand(self, path).exists()

    def read_text(self, path: PathLike) -> str:
        return expand(self, path).read_text(encoding="utf-8")

    def write_text(self, path: PathLike, text: str, *, mode: Optional[int] = None) -> None:
        p = expand(self, path)
        if self.dry_run:
            logger.info("Would write %s", p)
            return
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        if mode is not None:
            p.chmod(mode)

    def append_text(self, path: PathLike, text: str) -> None:
        p = expand(self, path)
        if self.dry_run:
            logger.info("Would append to %s: %s", p, text.strip())
            return
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("a", encoding="utf-8") as fh:
            fh.write(text)

    def remove(self, path: PathLike) -> None:
        p = expand(self, path)
        if self.dry_run:
            logger.info("Would remove %s", p)
            return
        p.unlink(missing_ok=True)

    def make_dir(self, path: PathLike, *, mode: Optional[int] = None) -> None:
        p = expand(self, path)
        if self.dry_run:
            logger.info("Would create directory %s", p)
            return
        p.mkdir(parents=True, exist_ok=True)
        if mode is not None:
            p.chmod(mode)

    def getenv(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return os.environ.get(key, default)

    def setenv(self, key: str, value: str) -> None:
        # Applies to this process and every child it spawns.
        os.environ[key] = value

    def prompt(self, message: str) -> str:
        return input(message)

    def pause(self, message: str) -> None:
        sys.stdout.write(message)
        sys.stdout.flush()
        _read_single_key()
        sys.stdout.write("\n")

    def show(self, text: str) -> None:
        print(text)

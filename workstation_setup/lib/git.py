from __future__ import annotations

import logging
from typing import Optional

from .host import Host

logger = logging.getLogger(__name__)


def git_config_get(host: Host, key: str) -> Optional[str]:
    r = host.probe(["git", "config", "--global", "--get", key])
    if not r.ok:
        return None
    value = r.stdout.strip()
    return value or None


def git_config_set(host: Host, key: str, value: str) -> None:
    host.run(["git", "config", "--global", key, value])
    logger.info("git config --global %s set", key)

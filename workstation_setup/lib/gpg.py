from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .host import Host

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeySpec:
    name: str
    email: str
    key_type: str = "RSA"
    key_length: int = 4096
    key_usage: str = "sign"
    expire_date: str = "0"


def parse_secret_key_ids(colons_output: str) -> List[str]:
    """Extract primary secret key ids from `gpg --with-colons` output.

    Only `sec` records count; subkeys (`ssb`) are ignored. Field 5 holds the
    long key id.
    """

    ids: List[str] = []
    for line in colons_output.splitlines():
        fields = line.split(":")
        if len(fields) > 4 and fields[0] == "sec" and fields[4]:
            ids.append(fields[4])
    return ids


def first_secret_key_id(host: Host) -> Optional[str]:
    r = host.probe(["gpg", "--list-secret-keys", "--keyid-format", "LONG", "--with-colons"])
    if not r.ok:
        return None
    ids = parse_secret_key_ids(r.stdout)
    return ids[0] if ids else None


def render_batch_descriptor(spec: KeySpec) -> str:
    """Unattended key generation parameters (gpg --batch --gen-key)."""

    return "\n".join(
        [
            f"Key-Type: {spec.key_type}",
            f"Key-Length: {spec.key_length}",
            f"Key-Usage: {spec.key_usage}",
            f"Name-Real: {spec.name}",
            f"Name-Email: {spec.email}",
            f"Expire-Date: {spec.expire_date}",
            "%no-protection",
            "%commit",
            "",
        ]
    )


def generate_key(host: Host, spec: KeySpec, *, descriptor_path: Path) -> None:
    """Write the descriptor, run batch generation, always remove the descriptor."""

    host.make_dir(descriptor_path.parent, mode=0o700)
    host.write_text(descriptor_path, render_batch_descriptor(spec), mode=0o600)
    try:
        host.run(["gpg", "--batch", "--gen-key", str(descriptor_path)], interactive=True)
    finally:
        host.remove(descriptor_path)


def export_public_key(host: Host, key_id: str) -> str:
    out = host.run(["gpg", "--armor", "--export", key_id]).stdout
    if host.dry_run and not out:
        return f"<public key {key_id}>\n"
    return out

from __future__ import annotations

import logging

from .host import Host

logger = logging.getLogger(__name__)


def copy_to_clipboard(host: Host, text: str, *, tool: str = "pbcopy") -> None:
    host.run([tool], input_text=text)


def play_sound(host: Host, *, sound: str, player: str = "afplay") -> None:
    """Best-effort attention ping before the run blocks on the user."""

    if not sound:
        return
    r = host.run([player, sound], check=False)
    if not r.ok:
        logger.debug("Sound playback failed (%s)", r.returncode)

"""Clipboard access via platform programs, plus a timed auto-clear session."""

import logging
import os
import platform
import subprocess  # nosec B404
import time
from collections.abc import Callable
from dataclasses import dataclass

from mb_vault.errors import ClipboardUnavailable
from mb_vault.output import Output

logger = logging.getLogger(__name__)


def _copy_cmds() -> list[list[str]]:
    """Return candidate clipboard copy commands for this platform, in order of preference."""
    match platform.system():
        case "Darwin":
            return [["pbcopy"]]
        case "Windows":
            return [["clip"]]
    cmds: list[list[str]] = []
    if os.environ.get("WAYLAND_DISPLAY"):
        cmds.append(["wl-copy"])
    cmds.append(["xclip", "-selection", "clipboard"])
    cmds.append(["xsel", "--clipboard", "--input"])
    return cmds


def copy(text: str) -> None:
    """Copy text to the system clipboard, trying each known program in turn.

    Raises:
        ClipboardUnavailable: Every program failed or none is installed.

    """
    tried: list[str] = []
    for cmd in _copy_cmds():
        try:
            # S603: args are controlled literals, hardcoded clipboard commands.
            # Output goes to DEVNULL: xclip keeps inherited pipes open after forking.
            subprocess.run(  # noqa: S603  # nosec B603
                cmd, input=text.encode(), stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL, check=True
            )
        except (OSError, subprocess.CalledProcessError) as e:
            logger.debug("Clipboard program %s failed: %s", cmd[0], e)
            tried.append(cmd[0])
            continue
        return
    raise ClipboardUnavailable(f"All clipping programs failed. Tried: {', '.join(tried)}.")


def countdown_line(remaining: int) -> str:
    """Status line shown while waiting to clear the clipboard."""
    return f"Clearing the clipboard in {remaining} second(s)..."


@dataclass
class ClipboardTimer:
    """In-progress countdown: seconds left and the line currently on screen."""

    remaining: int
    last_line: str = ""


class ClipboardSession:
    """Copies one value to the clipboard and optionally clears it after a countdown."""

    def __init__(
        self, out: Output, *, copy_fn: Callable[[str], None] | None = None, sleep: Callable[[float], None] | None = None
    ) -> None:
        """Initialize the session.

        Args:
            out: Output used to render the countdown.
            copy_fn: Clipboard writer; defaults to :func:`copy`.
            sleep: Blocking sleep; defaults to :func:`time.sleep`.

        """
        self._out = out
        self._copy = copy_fn if copy_fn is not None else copy
        self._sleep = sleep if sleep is not None else time.sleep

    def copy(self, value: str) -> None:
        """Put value on the clipboard.

        Raises:
            ClipboardUnavailable: Clipboard could not be written.

        """
        self._copy(value)

    def run_countdown(self, seconds: int) -> None:
        """Block for ``seconds`` one-second ticks, then clear the clipboard.

        Not cancellable. Failing to clear is logged and otherwise ignored.
        """
        timer = ClipboardTimer(remaining=seconds)
        while timer.remaining > 0:
            line = countdown_line(timer.remaining)
            self._out.print_countdown(timer.last_line, line)
            timer.last_line = line
            self._sleep(1)
            timer.remaining -= 1

        try:
            self._copy("")
        except ClipboardUnavailable:
            logger.warning("Failed to clear clipboard after countdown")
        self._out.print_clipboard_cleared(timer.last_line)
        logger.info("Clipboard cleared after %d second(s)", seconds)

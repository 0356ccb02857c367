"""Clip an entry attribute: locate, resolve, copy and optionally clear after a countdown."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from mb_vault.attributes import Ambiguous, Found, NotFound, resolve_attribute
from mb_vault.clipboard import ClipboardSession
from mb_vault.errors import ClipError
from mb_vault.output import Output
from mb_vault.vault import Group

logger = logging.getLogger(__name__)

MAX_TIMEOUT = 2**31 - 1


@dataclass(frozen=True)
class ClipRequest:
    """Inputs of a single clip invocation.

    ``attribute`` is None when the caller did not pass one explicitly.
    """

    path: str
    timeout: str | None = None
    attribute: str | None = None
    totp: bool = False


def parse_timeout(raw: str | None) -> int:
    """Parse the optional timeout argument. Empty or missing means no countdown.

    Only ASCII digits are accepted, up to a signed 32-bit maximum.

    Raises:
        ClipError: Not an integer, not positive or too large (code: ``invalid_timeout``).

    """
    if not raw:
        return 0
    try:
        seconds = int(raw) if raw.isascii() and raw.strip().lstrip("+-").isdigit() else 0
    except ValueError:
        seconds = 0
    if not 0 < seconds <= MAX_TIMEOUT:
        raise ClipError("invalid_timeout", f"Invalid timeout value {raw}.")
    return seconds


def separated_list(items: Sequence[str]) -> str:
    """Join names for a message: ``a``, ``a and b``, ``a, b and c``."""
    if len(items) <= 1:
        return "".join(items)
    return f"{', '.join(items[:-1])} and {items[-1]}"


def clip_entry(root: Group, request: ClipRequest, *, out: Output, session: ClipboardSession) -> None:
    """Copy the requested attribute of the entry at ``request.path`` to the clipboard.

    Every failure is reported through ``out`` and ends in ``typer.Exit(1)``.
    A requested countdown blocks until the clipboard has been cleared.
    """
    try:
        seconds = parse_timeout(request.timeout)
        found = _resolve(root, request, out)
        session.copy(found.value)
    except ClipError as e:
        out.print_error_and_exit(e.code, str(e))

    logger.info("Copied attribute %s of entry %s", found.name, request.path)
    out.print_attribute_copied(found.name)
    if seconds > 0:
        session.run_countdown(seconds)


def _resolve(root: Group, request: ClipRequest, out: Output) -> Found:
    entry = root.find_entry_by_path(request.path)
    if entry is None:
        raise ClipError("entry_not_found", f"Entry {request.path} not found.")

    match resolve_attribute(entry, request.path, request.attribute, totp=request.totp):
        case Found() as found:
            return found
        case Ambiguous(requested=requested, candidates=candidates):
            raise ClipError(
                "ambiguous_attribute", f"Attribute {requested} is ambiguous, it matches {separated_list(candidates)}."
            )
        case NotFound(name=name):
            out.print_attribute_not_found_and_exit(name)

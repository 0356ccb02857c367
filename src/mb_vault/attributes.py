"""Attribute resolution: pick the single entry attribute a request refers to."""

from dataclasses import dataclass

from mb_vault.errors import ClipError
from mb_vault.vault import Entry

DEFAULT_ATTRIBUTE = "password"
TOTP_ATTRIBUTE = "totp"


@dataclass(frozen=True)
class Found:
    """Exactly one attribute matched."""

    name: str
    value: str


@dataclass(frozen=True)
class Ambiguous:
    """Several attributes matched; candidates are sorted by name."""

    requested: str
    candidates: tuple[str, ...]


@dataclass(frozen=True)
class NotFound:
    """No attribute matched."""

    name: str


Resolved = Found | Ambiguous | NotFound


def find_attributes(attributes: dict[str, str], name: str) -> list[str]:
    """Return attribute names matching ``name``, in attribute order.

    An exact match wins outright. Otherwise case-insensitive equality is tried,
    then case-insensitive prefix matching; the first tier with hits is returned.
    """
    if name in attributes:
        return [name]
    folded = name.casefold()
    equal = [key for key in attributes if key.casefold() == folded]
    if equal:
        return equal
    return [key for key in attributes if key.casefold().startswith(folded)]


def resolve_attribute(entry: Entry, path: str, requested: str | None = None, *, totp: bool = False) -> Resolved:
    """Resolve the requested attribute (or TOTP code) of an entry.

    ``requested`` is None when the caller did not pass an attribute, in which case
    ``password`` is used.

    Raises:
        ClipError: Both an attribute and TOTP were requested (code: ``conflicting_selectors``)
            or TOTP was requested for an entry without it (code: ``no_totp``).

    """
    if totp and requested is not None:
        raise ClipError("conflicting_selectors", "Please specify one of --attribute or --totp, not both.")

    name = DEFAULT_ATTRIBUTE if requested is None else requested
    if totp or name == TOTP_ATTRIBUTE:
        if not entry.has_totp:
            raise ClipError("no_totp", f"Entry with path {path} has no TOTP set up.")
        return Found(TOTP_ATTRIBUTE, entry.totp_value())

    matches = find_attributes(entry.attributes, name)
    if not matches:
        return NotFound(name)
    if len(matches) > 1:
        return Ambiguous(name, tuple(sorted(matches)))
    return Found(matches[0], entry.attributes[matches[0]])

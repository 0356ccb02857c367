"""Add a new entry."""

from typing import Annotated

import typer

from mb_vault.app_context import unlock_vault, use_context
from mb_vault.output import Output
from mb_vault.totp import TotpSettings
from mb_vault.vault import VaultError


def add(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Path of the new entry, e.g. Email/Work.")],
    *,
    attrs: Annotated[list[str] | None, typer.Option("--attr", help="Extra attribute as NAME=VALUE (repeatable).")] = None,
    totp_uri: Annotated[str | None, typer.Option("--totp-uri", help="otpauth://totp/... URI for one-time codes.")] = None,
) -> None:
    """Add a new entry (password entered interactively)."""
    app = use_context(ctx)
    extra = _parse_attrs(attrs or [], app.out)
    totp_settings = None
    if totp_uri:
        try:
            totp_settings = TotpSettings.from_uri(totp_uri)
        except ValueError:
            app.out.print_error_and_exit("invalid_totp", "Invalid otpauth URI.")

    unlock_vault(app)
    try:
        attributes: dict[str, str] = {}
        if "password" not in extra:
            password: str = typer.prompt("Entry password (empty to skip)", hide_input=True, default="", show_default=False)
            if password:
                attributes["password"] = password
        attributes.update(extra)
        app.vault.add_entry(path, attributes, totp_settings)
    except VaultError as e:
        app.out.print_error_and_exit(e.code, str(e))
    finally:
        app.vault.lock()
    app.out.print_entry_added(path)


def _parse_attrs(pairs: list[str], out: Output) -> dict[str, str]:
    """Turn NAME=VALUE pairs into an ordered mapping."""
    result: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            out.print_error_and_exit("invalid_attribute", f"Invalid attribute '{pair}', expected NAME=VALUE.")
        result[name] = value
    return result

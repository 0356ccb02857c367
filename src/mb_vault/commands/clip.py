"""Copy an entry's attribute to the clipboard."""

from typing import Annotated

import typer

from mb_vault.app_context import unlock_vault, use_context
from mb_vault.clip import ClipRequest, clip_entry
from mb_vault.clipboard import ClipboardSession


def clip(
    ctx: typer.Context,
    entry: Annotated[str, typer.Argument(help="Path of the entry to clip.")],
    timeout: Annotated[str | None, typer.Argument(help="Timeout in seconds before clearing the clipboard.")] = None,
    *,
    attribute: Annotated[
        str | None,
        typer.Option(
            "--attribute", "-a", help='Copy the given attribute to the clipboard. Defaults to "password" if not specified.'
        ),
    ] = None,
    totp: Annotated[
        bool, typer.Option("--totp", "-t", help='Copy the current TOTP to the clipboard (equivalent to "-a totp").')
    ] = False,
) -> None:
    """Copy an entry's attribute to the clipboard."""
    app = use_context(ctx)
    root = unlock_vault(app)
    request = ClipRequest(path=entry, timeout=timeout, attribute=attribute, totp=totp)
    try:
        clip_entry(root, request, out=app.out, session=ClipboardSession(app.out))
    finally:
        app.vault.lock()

"""Application context shared across CLI commands."""

from dataclasses import dataclass

import typer

from mb_vault.config import Config
from mb_vault.output import Output
from mb_vault.vault import Group, Vault, VaultError


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared application state passed through Typer context."""

    out: Output
    vault: Vault
    cfg: Config


def use_context(ctx: typer.Context) -> AppContext:
    """Extract application context from Typer context."""
    result: AppContext = ctx.obj
    return result


def unlock_vault(app: AppContext) -> Group:
    """Prompt for the master password and return the decrypted root group.

    Exits with an error if the vault is missing or the password is wrong.
    """
    if not app.vault.store_exists:
        app.out.print_error_and_exit("not_initialized", "Vault is not initialized. Run 'mb-vault init' first.")
    password: str = typer.prompt("Enter master password", hide_input=True)
    try:
        return app.vault.unlock(password)
    except VaultError as e:
        app.out.print_error_and_exit(e.code, str(e))

"""CLI entry point for mb-vault."""

from pathlib import Path
from typing import Annotated

import typer
from mm_clikit import TyperPlus

from mb_vault.app_context import AppContext
from mb_vault.commands.add import add
from mb_vault.commands.clip import clip
from mb_vault.commands.init import init
from mb_vault.config import Config
from mb_vault.log import setup_logging
from mb_vault.output import Output
from mb_vault.vault import Vault

app = TyperPlus(package_name="mb-vault")


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Silence normal output; errors are still shown.")] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path.")] = None,
) -> None:
    """Encrypted credential vault with clipboard access from the terminal."""
    cfg = Config.build(data_dir)
    cfg.data_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(cfg.log_path)
    ctx.obj = AppContext(out=Output(quiet=quiet), vault=Vault(cfg.vault_path, scrypt_n=cfg.scrypt_n), cfg=cfg)


# Setup
app.command()(init)

# Entries
app.command()(add)
app.command(aliases=["c"])(clip)

"""Human-readable CLI output on two channels: normal (quiet-able) and error."""

# ruff: noqa: T201
# This module is the output layer; print() is its sole mechanism for producing CLI output.

import logging
import sys
from typing import NoReturn, TextIO

import typer

logger = logging.getLogger(__name__)


class Output:
    """Handles all CLI output. Quiet mode suppresses normal output, never errors."""

    def __init__(self, *, quiet: bool = False, stdout: TextIO | None = None, stderr: TextIO | None = None) -> None:
        """Initialize output handler.

        Args:
            quiet: If True, normal output is dropped.
            stdout: Normal channel; defaults to ``sys.stdout`` at write time.
            stderr: Error channel; defaults to ``sys.stderr`` at write time.

        """
        self._quiet = quiet
        self._stdout = stdout
        self._stderr = stderr

    @property
    def _out(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def _err(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    def _success(self, message: str) -> None:
        if not self._quiet:
            print(message, file=self._out)

    def print_error_and_exit(self, code: str, message: str) -> NoReturn:
        """Print an error to the error channel and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        logger.debug("Command failed: %s", code)
        print(f"Error: {message}", file=self._err)
        raise typer.Exit(code=1)

    # --- Vault ---

    def print_init_done(self) -> None:
        """Print vault creation confirmation."""
        self._success("Vault created.")

    def print_entry_added(self, path: str) -> None:
        """Print entry add confirmation."""
        self._success(f"Entry {path} added.")

    # --- Clip ---

    def print_attribute_not_found_and_exit(self, name: str) -> NoReturn:
        """Report a missing attribute on the normal channel and exit with code 1.

        Unlike other failures this goes to stdout, so ``--quiet`` silences it.

        Raises:
            typer.Exit: Always, with code 1.

        """
        logger.debug("Command failed: attribute_not_found")
        self._success(f'Attribute "{name}" not found.')
        raise typer.Exit(code=1)

    def print_attribute_copied(self, name: str) -> None:
        """Print clipboard copy confirmation."""
        self._success(f"Entry's \"{name}\" attribute copied to the clipboard!")

    def print_countdown(self, previous: str, line: str) -> None:
        """Replace the previous countdown line with ``line``, without a newline."""
        if self._quiet:
            return
        self._erase(previous)
        self._out.write(line)
        self._out.flush()

    def print_clipboard_cleared(self, previous: str) -> None:
        """Erase the countdown line and confirm the clipboard was cleared."""
        if self._quiet:
            return
        self._erase(previous)
        print("Clipboard cleared!", file=self._out)

    def _erase(self, previous: str) -> None:
        self._out.write("\r" + " " * len(previous) + "\r")

"""Tests for the clip command orchestration."""

import pytest
import typer

from conftest import Captured, FakeClipboard
from mb_vault.clip import ClipRequest, clip_entry, parse_timeout, separated_list
from mb_vault.clipboard import ClipboardSession
from mb_vault.errors import ClipError
from mb_vault.vault import Group


def run(root: Group, request: ClipRequest, captured: Captured, clipboard: FakeClipboard, sleeps: list[float] | None = None) -> int:
    """Run clip_entry and return the exit code it would produce."""
    session = ClipboardSession(captured.out, copy_fn=clipboard, sleep=(sleeps if sleeps is not None else []).append)
    try:
        clip_entry(root, request, out=captured.out, session=session)
    except typer.Exit as e:
        return e.exit_code
    return 0


class TestParseTimeout:
    """Timeout argument validation."""

    @pytest.mark.parametrize("raw", ["0", "-5", "abc", "1.5", " ", "٣", "1_000", "+-3", "2147483648"])
    def test_invalid(self, raw: str) -> None:
        """Non-positive or non-integer values are rejected."""
        with pytest.raises(ClipError) as exc_info:
            parse_timeout(raw)
        assert exc_info.value.code == "invalid_timeout"
        assert str(exc_info.value) == f"Invalid timeout value {raw}."

    @pytest.mark.parametrize("raw", [None, ""])
    def test_absent(self, raw: str | None) -> None:
        """Missing or empty timeout means no countdown."""
        assert parse_timeout(raw) == 0

    def test_valid(self) -> None:
        """Positive integer is returned as seconds."""
        assert parse_timeout("3") == 3

    def test_signed_and_maximum(self) -> None:
        """An explicit plus sign and the 32-bit maximum are accepted."""
        assert parse_timeout("+3") == 3
        assert parse_timeout("2147483647") == 2**31 - 1


class TestSeparatedList:
    """Candidate list formatting."""

    def test_two(self) -> None:
        """Two names are joined with 'and'."""
        assert separated_list(["a", "b"]) == "a and b"

    def test_three(self) -> None:
        """Three names use commas and a final 'and'."""
        assert separated_list(("a", "b", "c")) == "a, b and c"


class TestClipEntry:
    """End-to-end orchestration over an in-memory tree."""

    def test_default_password(self, root: Group, captured: Captured, fake_clipboard: FakeClipboard) -> None:
        """No attribute copies the password and exits 0."""
        assert run(root, ClipRequest("Email/Work"), captured, fake_clipboard) == 0
        assert fake_clipboard.content == "p@ss"
        assert captured.stdout.getvalue() == "Entry's \"password\" attribute copied to the clipboard!\n"

    def test_prefix_attribute(self, root: Group, captured: Captured, fake_clipboard: FakeClipboard) -> None:
        """'user' uniquely matches 'username'."""
        assert run(root, ClipRequest("Email/Work", attribute="user"), captured, fake_clipboard) == 0
        assert fake_clipboard.content == "bob"
        assert '"username"' in captured.stdout.getvalue()

    def test_attribute_not_found_goes_to_stdout(self, root: Group, captured: Captured, fake_clipboard: FakeClipboard) -> None:
        """Missing attribute is reported on stdout with a failure exit code."""
        assert run(root, ClipRequest("Email/Work", attribute="x"), captured, fake_clipboard) == 1
        assert captured.stdout.getvalue() == 'Attribute "x" not found.\n'
        assert captured.stderr.getvalue() == ""
        assert fake_clipboard.writes == []

    def test_attribute_not_found_quiet(self, root: Group, quiet_captured: Captured, fake_clipboard: FakeClipboard) -> None:
        """Quiet mode silences the missing-attribute message but still fails."""
        assert run(root, ClipRequest("Email/Work", attribute="x"), quiet_captured, fake_clipboard) == 1
        assert quiet_captured.stdout.getvalue() == ""
        assert quiet_captured.stderr.getvalue() == ""

    def test_ambiguous(self, root: Group, captured: Captured, fake_clipboard: FakeClipboard) -> None:
        """Ambiguity lists every candidate and leaves the clipboard alone."""
        assert run(root, ClipRequest("Bank", attribute="pi"), captured, fake_clipboard) == 1
        assert captured.stderr.getvalue() == "Error: Attribute pi is ambiguous, it matches PIN2 and pin.\n"
        assert fake_clipboard.writes == []

    def test_case_insensitive_password(self, root: Group, captured: Captured, fake_clipboard: FakeClipboard) -> None:
        """Default 'password' finds 'Password' case-insensitively."""
        assert run(root, ClipRequest("Bank"), captured, fake_clipboard) == 0
        assert fake_clipboard.content == "upper"

    def test_entry_not_found(self, root: Group, captured: Captured, fake_clipboard: FakeClipboard) -> None:
        """Unknown path fails on stderr."""
        assert run(root, ClipRequest("Email/Play"), captured, fake_clipboard) == 1
        assert captured.stderr.getvalue() == "Error: Entry Email/Play not found.\n"
        assert fake_clipboard.writes == []

    def test_path_is_case_sensitive(self, root: Group, captured: Captured, fake_clipboard: FakeClipboard) -> None:
        """Path segments must match exactly."""
        assert run(root, ClipRequest("email/work"), captured, fake_clipboard) == 1

    @pytest.mark.parametrize("timeout", ["0", "-5", "abc"])
    def test_invalid_timeout(self, root: Group, captured: Captured, fake_clipboard: FakeClipboard, timeout: str) -> None:
        """Invalid timeouts fail before the clipboard is touched."""
        assert run(root, ClipRequest("Email/Work", timeout=timeout), captured, fake_clipboard) == 1
        assert captured.stderr.getvalue() == f"Error: Invalid timeout value {timeout}.\n"
        assert fake_clipboard.writes == []

    def test_no_totp(self, root: Group, captured: Captured, fake_clipboard: FakeClipboard) -> None:
        """TOTP on an entry without it fails without touching the clipboard."""
        assert run(root, ClipRequest("Email/Work", totp=True), captured, fake_clipboard) == 1
        assert captured.stderr.getvalue() == "Error: Entry with path Email/Work has no TOTP set up.\n"
        assert fake_clipboard.writes == []

    def test_conflicting_selectors(self, root: Group, captured: Captured, fake_clipboard: FakeClipboard) -> None:
        """Attribute and TOTP together are rejected."""
        assert run(root, ClipRequest("Email/Home", attribute="url", totp=True), captured, fake_clipboard) == 1
        assert "not both" in captured.stderr.getvalue()
        assert fake_clipboard.writes == []

    def test_totp(self, root: Group, captured: Captured, fake_clipboard: FakeClipboard) -> None:
        """TOTP flag copies a six-digit code."""
        assert run(root, ClipRequest("Email/Home", totp=True), captured, fake_clipboard) == 0
        assert fake_clipboard.content is not None
        assert len(fake_clipboard.content) == 6
        assert '"totp"' in captured.stdout.getvalue()

    def test_clipboard_unavailable(self, root: Group, captured: Captured, fake_clipboard: FakeClipboard) -> None:
        """Copy failure is reported and no countdown starts."""
        fake_clipboard.fail = True
        sleeps: list[float] = []
        assert run(root, ClipRequest("Email/Work", timeout="3"), captured, fake_clipboard, sleeps) == 1
        assert captured.stderr.getvalue().startswith("Error: All clipping programs failed.")
        assert sleeps == []

    def test_countdown(self, root: Group, captured: Captured, fake_clipboard: FakeClipboard) -> None:
        """Timeout 3 ticks three times and clears to the empty string."""
        sleeps: list[float] = []
        assert run(root, ClipRequest("Email/Work", timeout="3"), captured, fake_clipboard, sleeps) == 0
        assert sleeps == [1, 1, 1]
        assert fake_clipboard.writes == ["p@ss", ""]
        assert captured.stdout.getvalue().endswith("Clipboard cleared!\n")

    def test_idempotent(self, root: Group, captured: Captured, fake_clipboard: FakeClipboard) -> None:
        """Running twice gives the same clipboard and exit code."""
        first = run(root, ClipRequest("Email/Work"), captured, fake_clipboard)
        content = fake_clipboard.content
        second = run(root, ClipRequest("Email/Work"), captured, fake_clipboard)
        assert first == second == 0
        assert fake_clipboard.content == content == "p@ss"

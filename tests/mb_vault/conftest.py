"""Shared fixtures: cheap vaults, fake clipboards and captured output."""

import io
from dataclasses import dataclass, field

import pytest

from mb_vault.config import MIN_SCRYPT_N
from mb_vault.errors import ClipboardUnavailable
from mb_vault.output import Output
from mb_vault.totp import TotpSettings
from mb_vault.vault import Entry, Group

# RFC 6238 test secret ("12345678901234567890" in base32)
TOTP_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
FAST_SCRYPT_N = MIN_SCRYPT_N


@dataclass
class FakeClipboard:
    """Records clipboard writes; can be told to fail."""

    writes: list[str] = field(default_factory=list)
    fail: bool = False
    fail_on_clear: bool = False

    def __call__(self, text: str) -> None:
        """Record a write, or fail as configured."""
        if self.fail or (self.fail_on_clear and text == ""):
            raise ClipboardUnavailable("All clipping programs failed. Tried: xclip.")
        self.writes.append(text)

    @property
    def content(self) -> str | None:
        """Last value written, if any."""
        return self.writes[-1] if self.writes else None


@dataclass
class Captured:
    """Output bound to in-memory streams."""

    out: Output
    stdout: io.StringIO
    stderr: io.StringIO


def make_captured(*, quiet: bool = False) -> Captured:
    """Build an Output writing to fresh in-memory streams."""
    stdout, stderr = io.StringIO(), io.StringIO()
    return Captured(out=Output(quiet=quiet, stdout=stdout, stderr=stderr), stdout=stdout, stderr=stderr)


@pytest.fixture
def fake_clipboard() -> FakeClipboard:
    """Clipboard writer that records values."""
    return FakeClipboard()


@pytest.fixture
def captured() -> Captured:
    """Output capturing both channels."""
    return make_captured()


@pytest.fixture
def root() -> Group:
    """Tree with Email/Work, Email/Home (TOTP) and a top-level Bank entry."""
    return Group(
        groups=[
            Group(
                name="Email",
                entries=[
                    Entry(title="Work", attributes={"password": "p@ss", "username": "bob"}),
                    Entry(
                        title="Home",
                        attributes={"password": "h0me", "URL": "https://mail.example", "url-backup": "https://b.example"},
                        totp=TotpSettings(secret=TOTP_SECRET),
                    ),
                ],
            )
        ],
        entries=[Entry(title="Bank", attributes={"Password": "upper", "pin": "1234", "PIN2": "5678"})],
    )


@pytest.fixture
def quiet_captured() -> Captured:
    """Quiet Output capturing both channels."""
    return make_captured(quiet=True)

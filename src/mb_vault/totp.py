"""Time-based one-time codes for vault entries."""

import base64
import hashlib
from datetime import datetime

import pyotp
from pydantic import BaseModel, ConfigDict, Field, field_validator


class TotpSettings(BaseModel):
    """TOTP parameters attached to an entry."""

    model_config = ConfigDict(frozen=True)

    secret: str = Field(min_length=1, description="Base32-encoded shared secret")
    digits: int = Field(default=6, ge=6, le=10)
    period: int = Field(default=30, ge=1, description="Code lifetime in seconds")
    algorithm: str = Field(default="SHA1", pattern=r"^SHA(1|256|512)$")

    @field_validator("secret")
    @classmethod
    def _base32(cls, value: str) -> str:
        padded = value + "=" * (-len(value) % 8)
        try:
            base64.b32decode(padded, casefold=True)
        except ValueError:
            msg = "secret must be base32-encoded"
            raise ValueError(msg) from None
        return value

    @staticmethod
    def from_uri(uri: str) -> "TotpSettings":
        """Build settings from an ``otpauth://totp/...`` URI.

        Raises:
            ValueError: Not a TOTP otpauth URI, or its secret is not base32.

        """
        otp = pyotp.parse_uri(uri)
        if not isinstance(otp, pyotp.TOTP):
            msg = "Only otpauth://totp URIs are supported."
            raise ValueError(msg)
        return TotpSettings(
            secret=otp.secret, digits=otp.digits, period=otp.interval, algorithm=otp.digest().name.upper()
        )


def generate(settings: TotpSettings, at: datetime | None = None) -> str:
    """Return the code valid at ``at`` (defaults to now)."""
    otp = pyotp.TOTP(
        settings.secret,
        digits=settings.digits,
        digest=getattr(hashlib, settings.algorithm.lower()),
        interval=settings.period,
    )
    return otp.now() if at is None else otp.at(at)

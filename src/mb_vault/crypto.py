"""Vault sealing: scrypt key derivation and AES-256-GCM encryption."""

import os
from dataclasses import dataclass

from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

SCRYPT_SALT_LENGTH = 16
SCRYPT_KEY_LENGTH = 32
SCRYPT_N = 1_048_576
SCRYPT_R = 8
SCRYPT_P = 1

AES_GCM_NONCE_LENGTH = 12


@dataclass(frozen=True)
class KdfParams:
    """scrypt parameters stored in the vault header."""

    salt: bytes
    n: int = SCRYPT_N
    r: int = SCRYPT_R
    p: int = SCRYPT_P

    def __post_init__(self) -> None:
        if self.n < 2 or self.n & (self.n - 1):
            msg = f"scrypt n must be a power of two greater than 1, got {self.n}"
            raise ValueError(msg)
        if self.r < 1 or self.p < 1:
            msg = f"scrypt r and p must be positive, got r={self.r} p={self.p}"
            raise ValueError(msg)

    @staticmethod
    def generate(n: int = SCRYPT_N) -> "KdfParams":
        """Fresh parameters with a random salt."""
        return KdfParams(salt=os.urandom(SCRYPT_SALT_LENGTH), n=n)


@dataclass(frozen=True)
class Sealed:
    """Nonce and ciphertext produced by AES-256-GCM."""

    nonce: bytes
    ciphertext: bytes


def derive_key(password: str, params: KdfParams) -> bytes:
    """Derive a 32-byte AES key from the master password."""
    kdf = Scrypt(salt=params.salt, length=SCRYPT_KEY_LENGTH, n=params.n, r=params.r, p=params.p)
    return kdf.derive(password.encode())


def seal(plaintext: bytes, key: bytes) -> Sealed:
    """Encrypt plaintext under a fresh random nonce."""
    nonce = os.urandom(AES_GCM_NONCE_LENGTH)
    return Sealed(nonce=nonce, ciphertext=AESGCM(key).encrypt(nonce, plaintext, None))


def unseal(sealed: Sealed, key: bytes) -> bytes:
    """Decrypt and authenticate a sealed payload.

    Raises:
        InvalidTag: Wrong key or tampered ciphertext.

    """
    return AESGCM(key).decrypt(sealed.nonce, sealed.ciphertext, None)

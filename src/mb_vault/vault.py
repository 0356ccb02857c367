"""Encrypted credential vault: entry tree model and store I/O."""

import base64
import json
import logging
import os
from pathlib import Path

from cryptography.exceptions import InvalidTag
from pydantic import BaseModel, Field, ValidationError

from mb_vault.crypto import SCRYPT_N, KdfParams, Sealed, derive_key, seal, unseal
from mb_vault.totp import TotpSettings, generate

logger = logging.getLogger(__name__)


class Entry(BaseModel):
    """A named credential record with ordered attributes and optional TOTP."""

    title: str
    attributes: dict[str, str] = Field(default_factory=dict)
    totp: TotpSettings | None = None

    @property
    def has_totp(self) -> bool:
        """Check if TOTP is configured for this entry."""
        return self.totp is not None

    def totp_value(self) -> str:
        """Return the current one-time code.

        Raises:
            ValueError: TOTP is not configured.

        """
        if self.totp is None:
            msg = f"Entry '{self.title}' has no TOTP set up."
            raise ValueError(msg)
        return generate(self.totp)


class Group(BaseModel):
    """A node of the entry tree. The root group has an empty name."""

    name: str = ""
    groups: list["Group"] = Field(default_factory=list)
    entries: list[Entry] = Field(default_factory=list)

    def find_entry_by_path(self, path: str) -> Entry | None:
        """Return the entry addressed by a ``/``-separated path, or None.

        Segments match group names and, for the last one, the entry title.
        Matching is exact and case-sensitive; the first match in tree order wins.
        """
        segments = split_path(path)
        if not segments:
            return None
        return self._find(segments)

    def _find(self, segments: list[str]) -> Entry | None:
        head, rest = segments[0], segments[1:]
        if not rest:
            return next((e for e in self.entries if e.title == head), None)
        for group in self.groups:
            if group.name == head:
                found = group._find(rest)
                if found is not None:
                    return found
        return None

    def child_group(self, name: str) -> "Group":
        """Return the named child group, creating it if missing."""
        for group in self.groups:
            if group.name == name:
                return group
        group = Group(name=name)
        self.groups.append(group)
        return group


def split_path(path: str) -> list[str]:
    """Split an entry path into segments, ignoring leading and trailing slashes."""
    stripped = path.strip("/")
    return stripped.split("/") if stripped else []


class VaultError(Exception):
    """Application-level error raised by Vault operations."""

    def __init__(self, code: str, message: str) -> None:
        """Initialize with a machine-readable code and a human-readable message.

        Args:
            code: Machine-readable error code (e.g. "wrong_password").
            message: Human-readable error description.

        """
        super().__init__(message)
        self.code = code


class Vault:
    """Encrypted vault file holding a single entry tree."""

    def __init__(self, vault_path: Path, *, scrypt_n: int = SCRYPT_N) -> None:
        """Initialize the vault data access layer.

        Args:
            vault_path: Path to the encrypted vault file.
            scrypt_n: scrypt cost used when creating a new vault.

        """
        self._vault_path = vault_path
        self._scrypt_n = scrypt_n
        # Populated by unlock, wiped by lock. The key and its KDF params are kept to re-encrypt on add.
        self._key: bytes | None = None
        self._kdf: KdfParams | None = None
        self._root: Group | None = None

    @property
    def store_exists(self) -> bool:
        """Check if the vault file exists."""
        return self._vault_path.exists()

    def init(self, password: str) -> None:
        """Create a new vault with an empty root group.

        Raises:
            VaultError: Already exists (code: ``already_initialized``) or empty password (code: ``empty_password``).

        """
        if self.store_exists:
            raise VaultError("already_initialized", "Vault already exists.")
        if not password:
            raise VaultError("empty_password", "Password cannot be empty.")
        self._vault_path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
        self._vault_path.parent.chmod(0o700)
        kdf = KdfParams.generate(self._scrypt_n)
        key = derive_key(password, kdf)
        self._write_store(kdf, seal(Group().model_dump_json().encode(), key))
        logger.info("Created vault at %s", self._vault_path)

    def unlock(self, password: str) -> Group:
        """Derive the key, decrypt the vault and return the root group.

        Raises:
            VaultError: Not initialized (code: ``not_initialized``), wrong password
                (code: ``wrong_password``) or undecodable content (code: ``corrupted``).

        """
        if not self.store_exists:
            raise VaultError("not_initialized", "Vault is not initialized. Run 'mb-vault init' first.")
        kdf, sealed = self._read_store()
        key = derive_key(password, kdf)
        try:
            plaintext = unseal(sealed, key)
        except InvalidTag:
            raise VaultError("wrong_password", "Wrong password.") from None
        try:
            root = Group.model_validate_json(plaintext)
        except ValidationError:
            raise VaultError("corrupted", "Decrypted vault is not a valid entry tree. Vault may be corrupted.") from None
        self._key = key
        self._kdf = kdf
        self._root = root
        return root

    def lock(self) -> None:
        """Wipe key and entries from memory."""
        self._key = None
        self._kdf = None
        self._root = None

    @property
    def root(self) -> Group:
        """Root group of the unlocked vault.

        Raises:
            VaultError: Vault is locked (code: ``locked``).

        """
        if self._root is None:
            raise VaultError("locked", "Vault is locked. Unlock it first.")
        return self._root

    def add_entry(self, path: str, attributes: dict[str, str], totp_settings: TotpSettings | None = None) -> Entry:
        """Add an entry at ``path``, creating intermediate groups, and re-encrypt.

        Raises:
            VaultError: Vault is locked (code: ``locked``), empty path (code: ``invalid_path``)
                or the path is taken (code: ``entry_exists``).

        """
        root = self.root
        segments = split_path(path)
        if not segments or any(not s for s in segments):
            raise VaultError("invalid_path", f"Invalid entry path '{path}'.")
        if root.find_entry_by_path(path) is not None:
            raise VaultError("entry_exists", f"Entry {path} already exists.")
        group = root
        for name in segments[:-1]:
            group = group.child_group(name)
        entry = Entry(title=segments[-1], attributes=attributes, totp=totp_settings)
        group.entries.append(entry)
        self._persist()
        logger.info("Added entry %s", path)
        return entry

    def _persist(self) -> None:
        if self._key is None or self._kdf is None or self._root is None:
            raise VaultError("locked", "Vault is locked. Unlock it first.")
        self._write_store(self._kdf, seal(self._root.model_dump_json().encode(), self._key))

    # --- Store I/O ---

    def _read_store(self) -> tuple[KdfParams, Sealed]:
        """Read the vault file and return its KDF params and sealed payload."""
        try:
            store = json.loads(self._vault_path.read_text())
            kdf = KdfParams(
                salt=base64.b64decode(store["kdf"]["salt"]),
                n=store["kdf"]["n"],
                r=store["kdf"]["r"],
                p=store["kdf"]["p"],
            )
            sealed = Sealed(
                nonce=base64.b64decode(store["encryption"]["nonce"]),
                ciphertext=base64.b64decode(store["encryption"]["ciphertext"]),
            )
        except (ValueError, KeyError, TypeError):
            raise VaultError("corrupted", "Vault file is malformed.") from None
        return kdf, sealed

    def _write_store(self, kdf: KdfParams, sealed: Sealed) -> None:
        """Write the vault file atomically."""
        store = {
            "kdf": {
                "algorithm": "scrypt",
                "salt": base64.b64encode(kdf.salt).decode(),
                "n": kdf.n,
                "r": kdf.r,
                "p": kdf.p,
            },
            "encryption": {
                "algorithm": "aes-256-gcm",
                "nonce": base64.b64encode(sealed.nonce).decode(),
                "ciphertext": base64.b64encode(sealed.ciphertext).decode(),
            },
        }
        tmp_path = self._vault_path.with_suffix(".tmp")
        data = (json.dumps(store, indent=2) + "\n").encode()
        # Owner-only permissions regardless of umask.
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            os.write(fd, data)
        finally:
            os.close(fd)
        tmp_path.replace(self._vault_path)

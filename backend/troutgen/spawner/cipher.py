"""Authenticated encryption of trait payloads and key derivation.

Keys come from HKDF-SHA512/256 over a single root secret, labelled by
purpose. Payloads are sealed with AES-256-GCM; the additional data is the
canonical JSON of a binding object, so a box only opens for the item it
was written for.
"""

from __future__ import annotations

import base64
import hashlib
import os
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from troutgen.spawner.descriptor import Box
from troutgen.spawner.errors import CipherError
from troutgen.utils.canonical import canonical_json

NONCE_SIZE = 12
KEY_SIZE = 32
LATEST_KEY_ID = 1
TEST_KEY_ID = 0
ARTIFACT_KEY_LABEL = "troutgen/encryption/artifacts"
DEVELOPMENT_SECRET = hashlib.sha256(b"troutgen/development").digest()


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    try:
        return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))
    except ValueError as e:
        raise CipherError(f"Malformed base64url field: {e}") from e


class Cipher:
    def __init__(self, root_secret: bytes, key_id: int = LATEST_KEY_ID) -> None:
        if not root_secret:
            raise ValueError("root secret must not be empty")
        self._root = root_secret
        self.key_id = key_id

    @classmethod
    def from_hex(cls, secret_hex: str, key_id: int = LATEST_KEY_ID) -> Cipher:
        """Build from a hex secret; an empty string selects the development secret."""
        return cls(bytes.fromhex(secret_hex) if secret_hex else DEVELOPMENT_SECRET, key_id)

    def derive_key(self, label: str, length: int = KEY_SIZE) -> bytes:
        hkdf = HKDF(algorithm=hashes.SHA512_256(), length=length, salt=None, info=label.encode())
        return hkdf.derive(self._root)

    def _key(self, key_id: int) -> bytes:
        if key_id == TEST_KEY_ID:
            return bytes([42]) * KEY_SIZE
        if key_id == LATEST_KEY_ID:
            return self.derive_key(ARTIFACT_KEY_LABEL)
        raise CipherError(f"Unknown key id: {key_id}")

    def encrypt(self, plaintext: bytes, binding: Any) -> Box:
        nonce = os.urandom(NONCE_SIZE)
        sealed = AESGCM(self._key(self.key_id)).encrypt(nonce, plaintext, canonical_json(binding))
        return Box(key_id=self.key_id, nonce=_b64encode(nonce), data=_b64encode(sealed))

    def decrypt(self, box: Box, binding: Any) -> bytes:
        aead = AESGCM(self._key(box.key_id))
        nonce = _b64decode(box.nonce)
        if len(nonce) != NONCE_SIZE:
            raise CipherError(f"Nonce must be {NONCE_SIZE} bytes, got {len(nonce)}")
        try:
            return aead.decrypt(nonce, _b64decode(box.data), canonical_json(binding))
        except InvalidTag as e:
            raise CipherError("Box does not open under this key and binding") from e

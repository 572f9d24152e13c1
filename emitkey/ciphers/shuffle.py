"""Salsa20 cipher whose nonce is shuffled with the key's salt."""

from __future__ import annotations

from ..key import Key
from .salsa import decode_encrypted, encode, fit_key, hsalsa20, xor_key_stream


class Shuffle:
    """Encrypts and decrypts security keys, mixing the salt into the nonce."""

    def __init__(self, key: bytes, nonce: bytes) -> None:
        if len(key) != 32 or len(nonce) != 16:
            raise ValueError("shuffled: invalid cryptographic key")
        self._key = bytes(key)
        self._nonce = bytes(nonce)

    def _crypt(self, data: bytes) -> bytes:
        salt, body = data[:2], data[2:]
        nonce = bytes(b ^ salt[i % 2] for i, b in enumerate(self._nonce))
        sub_key = hsalsa20(self._key, nonce)
        return salt + xor_key_stream(body, nonce, sub_key)

    def encrypt_key(self, key: bytes) -> str:
        """Encrypt a key and return it as unpadded URL-safe base64."""
        return encode(self._crypt(fit_key(key)))

    def decrypt_key(self, text: bytes | str) -> Key:
        """Decrypt a key from its 32-character base64 form."""
        return Key(self._crypt(decode_encrypted(text)))
"""AES-256-GCM wrapper.

The tag produced by GCM is appended to the ciphertext and kept that way: callers
store and pass around a single ``ciphertext_and_tag`` blob.
"""

from __future__ import annotations

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

KEY_LEN = 32
NONCE_LEN = 12
TAG_LEN = 16


class AesGcmEncryptor:
    """Stateless AES-256-GCM with no associated data."""

    @staticmethod
    def encrypt(key: bytes | bytearray, nonce: bytes, plaintext: bytes) -> bytes:
        _check_lengths(key, nonce)
        return AESGCM(key).encrypt(nonce, plaintext, None)

    @staticmethod
    def decrypt(key: bytes | bytearray, nonce: bytes, ciphertext_and_tag: bytes) -> bytes:
        """Return the plaintext, raising ``cryptography.exceptions.InvalidTag`` on mismatch."""
        _check_lengths(key, nonce)
        return AESGCM(key).decrypt(nonce, ciphertext_and_tag, None)


def _check_lengths(key: bytes | bytearray, nonce: bytes) -> None:
    if len(key) != KEY_LEN:
        raise ValueError(f"AES-256-GCM key must be {KEY_LEN} bytes, got {len(key)}")
    if len(nonce) != NONCE_LEN:
        raise ValueError(f"AES-GCM nonce must be {NONCE_LEN} bytes, got {len(nonce)}")

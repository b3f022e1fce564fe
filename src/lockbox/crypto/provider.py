"""Crypto provider capability injected into the container codec."""
from __future__ import annotations

import logging
import os
from typing import Protocol, runtime_checkable

from cryptography.exceptions import UnsupportedAlgorithm

from lockbox.crypto.aead import AesGcmEncryptor
from lockbox.crypto.kdf import Pbkdf2Params, derive_key_from_password, recommended_params
from lockbox.errors import PlatformUnavailable

logger = logging.getLogger(__name__)


@runtime_checkable
class CryptoProvider(Protocol):
    def random_bytes(self, length: int) -> bytes: ...

    def derive_key(self, password: bytes | bytearray, salt: bytes) -> bytes: ...

    def aead_encrypt(self, key: bytes | bytearray, nonce: bytes, plaintext: bytes) -> bytes: ...

    def aead_decrypt(self, key: bytes | bytearray, nonce: bytes, ciphertext_and_tag: bytes) -> bytes: ...


class DefaultCryptoProvider:
    """OS randomness, PBKDF2-HMAC-SHA256 and AES-256-GCM from ``cryptography``."""

    def __init__(self, params: Pbkdf2Params | None = None) -> None:
        self.params = params or recommended_params()

    def random_bytes(self, length: int) -> bytes:
        try:
            return os.urandom(length)
        except NotImplementedError as exc:
            raise PlatformUnavailable("No secure random source is available") from exc

    def derive_key(self, password: bytes | bytearray, salt: bytes) -> bytes:
        logger.debug("Deriving key with PBKDF2-HMAC-SHA256 (%d iterations)", self.params.iterations)
        try:
            return derive_key_from_password(password, salt, iterations=self.params.iterations)
        except UnsupportedAlgorithm as exc:
            raise PlatformUnavailable("PBKDF2-HMAC-SHA256 is not supported by the crypto backend") from exc

    def aead_encrypt(self, key: bytes | bytearray, nonce: bytes, plaintext: bytes) -> bytes:
        try:
            return AesGcmEncryptor.encrypt(key, nonce, plaintext)
        except UnsupportedAlgorithm as exc:
            raise PlatformUnavailable("AES-GCM is not supported by the crypto backend") from exc

    def aead_decrypt(self, key: bytes | bytearray, nonce: bytes, ciphertext_and_tag: bytes) -> bytes:
        try:
            return AesGcmEncryptor.decrypt(key, nonce, ciphertext_and_tag)
        except UnsupportedAlgorithm as exc:
            raise PlatformUnavailable("AES-GCM is not supported by the crypto backend") from exc

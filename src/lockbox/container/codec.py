"""Container codec: password-based encode/decode of whole byte strings."""
from __future__ import annotations

import logging

from lockbox.container.format import HEADER_LEN, build_container, parse_container
from lockbox.crypto.aead import NONCE_LEN
from lockbox.crypto.kdf import DERIVED_KEY_LEN, SALT_LEN
from lockbox.crypto.provider import CryptoProvider, DefaultCryptoProvider
from lockbox.crypto.secure_memory import SecureBuffer
from lockbox.errors import DecryptionFailed, InvalidInput, PlatformUnavailable
from lockbox.result import DecodeResult, Err, Ok

logger = logging.getLogger(__name__)

PasswordLike = bytes | bytearray | memoryview


class ContainerCodec:
    """Encode plaintext into ``salt || nonce || ciphertext_and_tag`` and back.

    The codec keeps no per-call state, so one instance can serve many threads.
    Every failure while opening a container is reported as the same
    :class:`DecryptionFailed`, whatever went wrong underneath.
    """

    def __init__(self, provider: CryptoProvider | None = None) -> None:
        self.provider: CryptoProvider = provider or DefaultCryptoProvider()

    def _random(self, length: int) -> bytes:
        data = self.provider.random_bytes(length)
        if len(data) != length:
            raise PlatformUnavailable(f"Random source returned {len(data)} bytes, expected {length}")
        return data

    def _derive(self, password: PasswordLike, salt: bytes) -> SecureBuffer:
        with SecureBuffer.from_bytes(password) as pw:
            derived = self.provider.derive_key(pw, salt)
        if len(derived) != DERIVED_KEY_LEN:
            raise PlatformUnavailable("Key derivation returned a key of unexpected length")
        key = SecureBuffer.from_bytes(derived)
        del derived
        logger.debug("Key buffer %s", "mlocked" if key.locked else "not mlocked")
        return key

    def encode(self, plaintext: bytes, password: PasswordLike) -> bytes:
        salt = self._random(SALT_LEN)
        nonce = self._random(NONCE_LEN)
        with self._derive(password, salt) as key:
            ciphertext_and_tag = self.provider.aead_encrypt(key, nonce, plaintext)
        container = build_container(salt, nonce, ciphertext_and_tag)
        logger.debug("Encoded %d plaintext bytes into %d-byte container", len(plaintext), len(container))
        return container

    def decode(self, container: bytes, password: PasswordLike) -> DecodeResult:
        if len(container) < HEADER_LEN:
            logger.debug("Rejected %d-byte input: shorter than container header", len(container))
            return Err(InvalidInput())

        layout = parse_container(container)
        plaintext: bytes | None = None
        with self._derive(password, layout.salt) as key:
            try:
                plaintext = self.provider.aead_decrypt(key, layout.nonce, layout.ciphertext_and_tag)
            except PlatformUnavailable:
                raise
            except Exception:  # noqa: BLE001
                plaintext = None

        # built outside the except block so no cause or context is attached
        if plaintext is None:
            logger.debug("Authentication failed for %d-byte container", len(container))
            return Err(DecryptionFailed())
        logger.debug("Decoded %d-byte container", len(container))
        return Ok(plaintext)

    def decrypt(self, container: bytes, password: PasswordLike) -> bytes:
        """Like :meth:`decode` but raises :class:`DecryptionFailed` instead of returning ``Err``."""
        return self.decode(container, password).unwrap()

"""Container layout helpers.

A container is ``salt(16) || nonce(12) || ciphertext_and_tag``. There is no
magic, version byte or length field; the first 28 bytes are always the salt
and nonce, and everything after them is the AES-GCM output.
"""

from __future__ import annotations

from dataclasses import dataclass

from lockbox.crypto.aead import NONCE_LEN, TAG_LEN
from lockbox.crypto.kdf import SALT_LEN
from lockbox.errors import InvalidInput

SALT_OFFSET = 0
NONCE_OFFSET = SALT_OFFSET + SALT_LEN
PAYLOAD_OFFSET = NONCE_OFFSET + NONCE_LEN
HEADER_LEN = PAYLOAD_OFFSET  # 28
OVERHEAD_LEN = HEADER_LEN + TAG_LEN  # 44


@dataclass(frozen=True)
class ContainerLayout:
    salt: bytes
    nonce: bytes
    ciphertext_and_tag: bytes

    @property
    def total_len(self) -> int:
        return HEADER_LEN + len(self.ciphertext_and_tag)

    @property
    def plaintext_len(self) -> int | None:
        """Plaintext size implied by the layout, or None if the payload cannot hold a tag."""
        if len(self.ciphertext_and_tag) < TAG_LEN:
            return None
        return len(self.ciphertext_and_tag) - TAG_LEN


def build_container(salt: bytes, nonce: bytes, ciphertext_and_tag: bytes) -> bytes:
    if len(salt) != SALT_LEN:
        raise ValueError(f"salt must be {SALT_LEN} bytes")
    if len(nonce) != NONCE_LEN:
        raise ValueError(f"nonce must be {NONCE_LEN} bytes")
    return b"".join((salt, nonce, ciphertext_and_tag))


def parse_container(data: bytes | bytearray | memoryview) -> ContainerLayout:
    """Split raw container bytes into their fields.

    Raises :class:`InvalidInput` when the input cannot even hold salt and nonce.
    The ciphertext is not checked; that is the cipher's job.
    """
    view = memoryview(data)
    if len(view) < HEADER_LEN:
        raise InvalidInput()
    return ContainerLayout(
        salt=bytes(view[SALT_OFFSET:NONCE_OFFSET]),
        nonce=bytes(view[NONCE_OFFSET:PAYLOAD_OFFSET]),
        ciphertext_and_tag=bytes(view[PAYLOAD_OFFSET:]),
    )


def container_len_for(plaintext_len: int) -> int:
    """Exact container size for a plaintext of ``plaintext_len`` bytes."""
    return plaintext_len + OVERHEAD_LEN

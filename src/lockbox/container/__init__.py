"""Public container API re-exported for external users.

The objects listed in ``__all__`` form the supported public surface for
Python consumers. Everything else in :mod:`lockbox.container` is considered
internal and may change without notice.
"""
from __future__ import annotations

from lockbox.container.api import (
    decrypt_file,
    decrypt_file_content,
    decrypted_name,
    encrypt_file,
    encrypt_file_content,
    encrypted_name,
    guess_mime_type,
    inspect_container,
)
from lockbox.container.codec import ContainerCodec
from lockbox.container.format import HEADER_LEN, OVERHEAD_LEN, ContainerLayout, container_len_for
from lockbox.crypto.provider import CryptoProvider, DefaultCryptoProvider
from lockbox.result import DecodeResult, Err, Ok

__all__ = [
    "ContainerCodec",
    "ContainerLayout",
    "CryptoProvider",
    "DecodeResult",
    "DefaultCryptoProvider",
    "Err",
    "HEADER_LEN",
    "OVERHEAD_LEN",
    "Ok",
    "container_len_for",
    "decrypt_file",
    "decrypt_file_content",
    "decrypted_name",
    "encrypt_file",
    "encrypt_file_content",
    "encrypted_name",
    "guess_mime_type",
    "inspect_container",
]

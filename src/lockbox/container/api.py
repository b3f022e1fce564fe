"""High-level API for encrypting and decrypting file contents and files."""

from __future__ import annotations

import logging
import mimetypes
import os
import re
import tempfile
from pathlib import Path

from lockbox.container.codec import ContainerCodec
from lockbox.container.format import ContainerLayout, parse_container
from lockbox.crypto.secure_memory import secure_zeroize
from lockbox.password_strength import require_password

logger = logging.getLogger(__name__)

ENCRYPTED_SUFFIX = ".enc"
DECRYPTED_PREFIX = "decrypted_"
DEFAULT_MIME_TYPE = "application/octet-stream"

# Types some platforms leave out of the mimetypes registry.
_KNOWN_MIME_TYPES = {
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".json": "application/json",
    ".svg": "image/svg+xml",
    ".mp3": "audio/mpeg",
    ".mp4": "video/mp4",
}

_SURROGATES = re.compile("[\ud800-\udfff]")

_default_codec: ContainerCodec | None = None


def _codec(codec: ContainerCodec | None) -> ContainerCodec:
    global _default_codec
    if codec is not None:
        return codec
    if _default_codec is None:
        _default_codec = ContainerCodec()
    return _default_codec


def _password_bytes(password: str) -> bytearray:
    # lone surrogates (e.g. undecodable argv bytes) become U+FFFD instead of failing to encode
    return bytearray(_SURROGATES.sub("\ufffd", password), "utf-8")


def encrypt_file_content(content: bytes, password: str, *, codec: ContainerCodec | None = None) -> bytes:
    """Encrypt ``content`` with ``password`` and return the container bytes."""
    require_password(password)
    password_bytes = _password_bytes(password)
    try:
        return _codec(codec).encode(content, password_bytes)
    finally:
        secure_zeroize(password_bytes)


def decrypt_file_content(content: bytes, password: str, *, codec: ContainerCodec | None = None) -> bytes:
    """Decrypt container bytes, raising :class:`~lockbox.errors.DecryptionFailed` on any problem."""
    password_bytes = _password_bytes(password)
    try:
        result = _codec(codec).decode(content, password_bytes)
    finally:
        secure_zeroize(password_bytes)
    return result.unwrap()


def inspect_container(data: bytes) -> ContainerLayout:
    """Describe a container's fields without a password."""
    return parse_container(data)


def encrypted_name(path: Path) -> Path:
    return path.with_name(path.name + ENCRYPTED_SUFFIX)


def decrypted_name(path: Path) -> Path:
    if path.name.endswith(ENCRYPTED_SUFFIX) and len(path.name) > len(ENCRYPTED_SUFFIX):
        return path.with_name(path.name[: -len(ENCRYPTED_SUFFIX)])
    return path.with_name(DECRYPTED_PREFIX + path.name)


def guess_mime_type(filename: str | os.PathLike[str]) -> str:
    """Best guess of a decrypted file's content type from its name."""
    suffix = Path(filename).suffix.lower()
    if suffix in _KNOWN_MIME_TYPES:
        return _KNOWN_MIME_TYPES[suffix]
    guessed, _encoding = mimetypes.guess_type(f"file{suffix}", strict=False)
    return guessed or DEFAULT_MIME_TYPE


def _ensure_output(path: Path, overwrite: bool) -> None:
    if path.exists():
        if path.is_dir():
            raise IsADirectoryError(f"Output path is a directory: {path}")
        if not overwrite:
            raise FileExistsError(f"Refusing to overwrite existing file: {path}")


def _write_atomic(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def encrypt_file(
    input_path: Path,
    output_path: Path | None,
    password: str,
    *,
    overwrite: bool = False,
    codec: ContainerCodec | None = None,
) -> Path:
    """Encrypt ``input_path`` into a container; defaults to ``<name>.enc`` alongside it."""
    input_path = Path(input_path)
    target = Path(output_path) if output_path is not None else encrypted_name(input_path)
    content = input_path.read_bytes()
    _ensure_output(target, overwrite)

    container = encrypt_file_content(content, password, codec=codec)
    _write_atomic(target, container)
    logger.debug("Wrote container %s (%d bytes)", target, len(container))
    return target


def decrypt_file(
    container_path: Path,
    output_path: Path | None,
    password: str,
    *,
    overwrite: bool = False,
    codec: ContainerCodec | None = None,
) -> Path:
    """Decrypt a container file. Nothing is written if decryption fails."""
    container_path = Path(container_path)
    target = Path(output_path) if output_path is not None else decrypted_name(container_path)
    data = container_path.read_bytes()
    _ensure_output(target, overwrite)

    plaintext = decrypt_file_content(data, password, codec=codec)
    _write_atomic(target, plaintext)
    logger.debug("Wrote decrypted file %s (%d bytes)", target, len(plaintext))
    return target

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from lockbox.container import api
from lockbox.container.codec import ContainerCodec
from lockbox.errors import DECRYPTION_FAILED_MESSAGE, DecryptionFailed, InvalidInput
from lockbox.password_strength import WeakPasswordError


def test_content_round_trip_with_text_password(fast_codec: ContainerCodec) -> None:
    container = api.encrypt_file_content(b"hello", "pässwörd", codec=fast_codec)

    assert len(container) == 49
    assert api.decrypt_file_content(container, "pässwörd", codec=fast_codec) == b"hello"


def test_default_codec_round_trip() -> None:
    container = api.encrypt_file_content(b"hello", "secret")

    assert api.decrypt_file_content(container, "secret") == b"hello"


def test_empty_password_refused_on_encrypt(fast_codec: ContainerCodec) -> None:
    with pytest.raises(WeakPasswordError):
        api.encrypt_file_content(b"data", "", codec=fast_codec)


def test_lone_surrogate_password_round_trips(fast_codec: ContainerCodec) -> None:
    container = api.encrypt_file_content(b"hello", "pw\udcff", codec=fast_codec)

    assert api.decrypt_file_content(container, "pw\udcff", codec=fast_codec) == b"hello"
    # encoded like a browser TextEncoder: lone surrogates become U+FFFD
    assert api.decrypt_file_content(container, "pw\ufffd", codec=fast_codec) == b"hello"


def test_lone_surrogate_wrong_password_is_decryption_failed(fast_codec: ContainerCodec) -> None:
    container = api.encrypt_file_content(b"hello", "secret", codec=fast_codec)

    with pytest.raises(DecryptionFailed) as excinfo:
        api.decrypt_file_content(container, "\udcff", codec=fast_codec)

    assert str(excinfo.value) == DECRYPTION_FAILED_MESSAGE


def test_decrypt_failure_is_opaque(fast_codec: ContainerCodec) -> None:
    container = api.encrypt_file_content(b"hello", "secret", codec=fast_codec)

    with pytest.raises(DecryptionFailed) as excinfo:
        api.decrypt_file_content(container, "secreT", codec=fast_codec)

    assert str(excinfo.value) == DECRYPTION_FAILED_MESSAGE
    assert excinfo.value.__cause__ is None
    assert excinfo.value.__suppress_context__


def test_short_content_raises_invalid_input(fast_codec: ContainerCodec) -> None:
    with pytest.raises(InvalidInput):
        api.decrypt_file_content(b"too short", "pw", codec=fast_codec)


def test_inspect_container_needs_no_password(fast_codec: ContainerCodec) -> None:
    container = api.encrypt_file_content(b"12345", "pw", codec=fast_codec)

    layout = api.inspect_container(container)

    assert layout.salt == container[:16]
    assert layout.nonce == container[16:28]
    assert layout.plaintext_len == 5


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("report.pdf.enc", "report.pdf"),
        ("archive.enc", "archive"),
        ("report.pdf", "decrypted_report.pdf"),
        (".enc", "decrypted_.enc"),
    ],
)
def test_decrypted_name(name: str, expected: str) -> None:
    assert api.decrypted_name(Path("/data") / name) == Path("/data") / expected


def test_encrypted_name_appends_suffix() -> None:
    assert api.encrypted_name(Path("dir/photo.jpg")) == Path("dir/photo.jpg.enc")


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("notes.txt", "text/plain"),
        ("photo.JPG", "image/jpeg"),
        ("doc.pdf", "application/pdf"),
        ("sheet.xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
        ("data.json", "application/json"),
        ("blob.unknownext", "application/octet-stream"),
        ("no_extension", "application/octet-stream"),
    ],
)
def test_guess_mime_type(name: str, expected: str) -> None:
    assert api.guess_mime_type(name) == expected


def test_file_round_trip_with_default_names(tmp_path: Path, fast_codec: ContainerCodec) -> None:
    source = tmp_path / "secret.txt"
    source.write_bytes(b"top secret")

    container = api.encrypt_file(source, None, "pw", codec=fast_codec)
    assert container == tmp_path / "secret.txt.enc"

    source.unlink()
    restored = api.decrypt_file(container, None, "pw", codec=fast_codec)
    assert restored == source
    assert restored.read_bytes() == b"top secret"


def test_encrypt_does_not_overwrite_without_flag(tmp_path: Path, fast_codec: ContainerCodec) -> None:
    source = tmp_path / "source.bin"
    source.write_bytes(b"content")
    container = tmp_path / "data.enc"
    container.write_bytes(b"existing")

    with pytest.raises(FileExistsError):
        api.encrypt_file(source, container, "pw", overwrite=False, codec=fast_codec)
    assert container.read_bytes() == b"existing"

    api.encrypt_file(source, container, "pw", overwrite=True, codec=fast_codec)
    assert len(container.read_bytes()) == len(b"content") + 44


def test_failed_decrypt_writes_nothing(tmp_path: Path, fast_codec: ContainerCodec) -> None:
    source = tmp_path / "source.bin"
    source.write_bytes(os.urandom(64))
    container = api.encrypt_file(source, None, "right", codec=fast_codec)
    output = tmp_path / "out.bin"

    with pytest.raises(DecryptionFailed):
        api.decrypt_file(container, output, "wrong", codec=fast_codec)

    assert not output.exists()
    assert sorted(p.name for p in tmp_path.iterdir()) == ["source.bin", "source.bin.enc"]

    with pytest.raises(DecryptionFailed):
        api.decrypt_file(container, tmp_path / "new" / "nested" / "out.bin", "wrong", codec=fast_codec)

    assert not (tmp_path / "new").exists()


def test_file_helpers_create_missing_parent_on_success(tmp_path: Path, fast_codec: ContainerCodec) -> None:
    source = tmp_path / "source.bin"
    source.write_bytes(b"data")

    container = api.encrypt_file(source, tmp_path / "sealed" / "source.bin.enc", "pw", codec=fast_codec)
    restored = api.decrypt_file(container, tmp_path / "opened" / "deep" / "source.bin", "pw", codec=fast_codec)

    assert restored.read_bytes() == b"data"


def test_empty_password_encrypt_creates_nothing(tmp_path: Path, fast_codec: ContainerCodec) -> None:
    source = tmp_path / "source.bin"
    source.write_bytes(b"data")

    with pytest.raises(WeakPasswordError):
        api.encrypt_file(source, tmp_path / "out" / "source.bin.enc", "", codec=fast_codec)

    assert not (tmp_path / "out").exists()


def test_decrypt_refuses_existing_output(tmp_path: Path, fast_codec: ContainerCodec) -> None:
    source = tmp_path / "source.bin"
    source.write_bytes(b"data")
    container = api.encrypt_file(source, None, "pw", codec=fast_codec)
    output = tmp_path / "output.bin"
    output.write_bytes(b"keep")

    with pytest.raises(FileExistsError):
        api.decrypt_file(container, output, "pw", codec=fast_codec)
    assert output.read_bytes() == b"keep"


def test_concurrent_operations_share_one_codec(fast_codec: ContainerCodec) -> None:
    payloads = [os.urandom(n * 37) for n in range(16)]

    def _round_trip(index: int) -> bytes:
        password = f"pw-{index}"
        container = api.encrypt_file_content(payloads[index], password, codec=fast_codec)
        return api.decrypt_file_content(container, password, codec=fast_codec)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(_round_trip, range(len(payloads))))

    assert results == payloads

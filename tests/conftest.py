import hashlib
import random
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

from lockbox.container.codec import ContainerCodec  # noqa: E402
from lockbox.crypto.aead import AesGcmEncryptor  # noqa: E402
from lockbox.crypto.kdf import Pbkdf2Params  # noqa: E402
from lockbox.crypto.provider import DefaultCryptoProvider  # noqa: E402

FAST_ITERATIONS = 1_000


class FakeCryptoProvider:
    """Seeded randomness, a cheap hash instead of PBKDF2, real AES-GCM.

    Keeps references to every password and key buffer it is handed so tests can
    check they were wiped afterwards.
    """

    def __init__(self, seed: int = 0) -> None:
        self._rng = random.Random(seed)
        self.derive_calls = 0
        self.seen_passwords: list[bytearray] = []
        self.seen_keys: list[bytearray] = []

    def random_bytes(self, length: int) -> bytes:
        return self._rng.randbytes(length)

    def derive_key(self, password, salt: bytes) -> bytes:
        self.derive_calls += 1
        self.seen_passwords.append(password)
        return hashlib.sha256(bytes(password) + salt).digest()

    def aead_encrypt(self, key, nonce: bytes, plaintext: bytes) -> bytes:
        self.seen_keys.append(key)
        return AesGcmEncryptor.encrypt(key, nonce, plaintext)

    def aead_decrypt(self, key, nonce: bytes, ciphertext_and_tag: bytes) -> bytes:
        self.seen_keys.append(key)
        return AesGcmEncryptor.decrypt(key, nonce, ciphertext_and_tag)


@pytest.fixture
def fake_provider() -> FakeCryptoProvider:
    return FakeCryptoProvider(seed=1234)


@pytest.fixture
def fake_codec(fake_provider: FakeCryptoProvider) -> ContainerCodec:
    return ContainerCodec(fake_provider)


@pytest.fixture(scope="session")
def fast_codec() -> ContainerCodec:
    """Real primitives with a low PBKDF2 cost so grids of decodes stay quick."""
    return ContainerCodec(DefaultCryptoProvider(Pbkdf2Params(iterations=FAST_ITERATIONS)))

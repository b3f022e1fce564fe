"""Key derivation helpers using PBKDF2-HMAC-SHA256."""

from __future__ import annotations

from dataclasses import dataclass

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from lockbox.errors import ConfigurationError

DEFAULT_ITERATIONS = 250_000
ITERATIONS_MIN = 100_000
ITERATIONS_MAX = 10_000_000
DERIVED_KEY_LEN = 32
SALT_LEN = 16


@dataclass(frozen=True)
class Pbkdf2Params:
    iterations: int = DEFAULT_ITERATIONS

    def __post_init__(self) -> None:
        if self.iterations < 1:
            raise ValueError(f"PBKDF2 iterations must be positive, got {self.iterations}")


def derive_key_from_password(
    password: bytes | bytearray,
    salt: bytes,
    *,
    iterations: int = DEFAULT_ITERATIONS,
) -> bytes:
    """Derive a 256-bit key from password using PBKDF2-HMAC-SHA256."""

    if len(salt) != SALT_LEN:
        raise ValueError(f"Salt must be {SALT_LEN} bytes long, got {len(salt)}")

    return _pbkdf2_sha256(password, salt, iterations, DERIVED_KEY_LEN)


def _pbkdf2_sha256(password: bytes | bytearray, salt: bytes, iterations: int, length: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=length,
        salt=bytes(salt),
        iterations=iterations,
    )
    return kdf.derive(password)


def recommended_params() -> Pbkdf2Params:
    """Return recommended default PBKDF2 parameters."""

    return Pbkdf2Params()


def resolve_pbkdf2_params(
    *,
    iterations: int | None = None,
    base: Pbkdf2Params | None = None,
) -> Pbkdf2Params:
    """Build validated PBKDF2 parameters using overrides when provided."""
    defaults = base or recommended_params()
    candidate = iterations if iterations is not None else defaults.iterations
    if not (ITERATIONS_MIN <= candidate <= ITERATIONS_MAX):
        raise ConfigurationError(
            f"PBKDF2 iterations must be between {ITERATIONS_MIN} and {ITERATIONS_MAX}",
        )
    return Pbkdf2Params(iterations=candidate)

"""Custom exceptions for Lockbox."""

DECRYPTION_FAILED_MESSAGE = "Decryption failed. Incorrect password or corrupted file."
INPUT_TOO_SHORT_MESSAGE = "Decryption failed. Input is too short to be a valid encrypted file."


class LockboxError(Exception):
    """Base exception for Lockbox."""


class DecryptionFailed(LockboxError):
    """Container could not be opened with the supplied password.

    Deliberately covers wrong passwords and corrupted or truncated data alike.
    """

    def __init__(self, message: str = DECRYPTION_FAILED_MESSAGE) -> None:
        super().__init__(message)


class InvalidInput(DecryptionFailed):
    """Input is too short to be a container; rejected before any crypto."""

    def __init__(self, message: str = INPUT_TOO_SHORT_MESSAGE) -> None:
        super().__init__(message)


class PlatformUnavailable(LockboxError):
    """Secure randomness or the crypto backend is missing."""


class ConfigurationError(LockboxError):
    """A tunable parameter is outside its supported range."""

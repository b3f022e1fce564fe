"""Best-effort hygiene for password and key buffers.

The codec copies the caller's password into a :class:`SecureBuffer` and keeps
the derived key in another one. Both are wiped when the ``with`` block ends.
Python gives no hard guarantees here (immutable ``bytes`` objects handed to
us, or created inside C extensions, cannot be scrubbed), so this only covers
memory Lockbox itself allocates.
"""
from __future__ import annotations

import ctypes
import ctypes.util
import logging
import platform
from types import TracebackType

logger = logging.getLogger(__name__)

_libc: ctypes.CDLL | None = None

if platform.system() != "Windows":
    try:
        _libc_name = ctypes.util.find_library("c")
        if _libc_name:
            _libc = ctypes.CDLL(_libc_name, use_errno=True)
            for _fn in (_libc.mlock, _libc.munlock):
                _fn.argtypes = [ctypes.c_void_p, ctypes.c_size_t]
                _fn.restype = ctypes.c_int
    except (OSError, AttributeError):
        _libc = None


def mlock_available() -> bool:
    """Return True if mlock can be attempted on this platform."""
    return _libc is not None


def secure_zeroize(data: bytearray | None) -> None:
    """Overwrite a bytearray with zeros in place."""
    if data is None:
        return
    length = len(data)
    if length == 0:
        return
    ctypes.memset((ctypes.c_char * length).from_buffer(data), 0, length)


class SecureBuffer:
    """Mutable buffer that is mlocked when possible and zeroed on close.

    Usage::

        with SecureBuffer.from_bytes(password) as pw:
            key = derive(pw, salt)
        # pw is all zeros here
    """

    def __init__(self, size: int) -> None:
        self._buffer = bytearray(size)
        self._locked = False
        if size and _libc is not None:
            self._locked = self._mlock()

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> SecureBuffer:
        secure = cls(len(data))
        secure._buffer[:] = data
        return secure

    def _address(self) -> int:
        return ctypes.addressof((ctypes.c_char * len(self._buffer)).from_buffer(self._buffer))

    def _mlock(self) -> bool:
        assert _libc is not None
        if _libc.mlock(self._address(), len(self._buffer)) == 0:
            return True
        logger.debug("mlock failed (errno=%d), proceeding without lock", ctypes.get_errno())
        return False

    def __enter__(self) -> bytearray:
        return self._buffer

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Zero the buffer and release the memory lock."""
        secure_zeroize(self._buffer)
        if self._locked and _libc is not None:
            if _libc.munlock(self._address(), len(self._buffer)) != 0:
                logger.debug("munlock failed (errno=%d)", ctypes.get_errno())
            self._locked = False

    @property
    def buffer(self) -> bytearray:
        return self._buffer

    @property
    def locked(self) -> bool:
        return self._locked

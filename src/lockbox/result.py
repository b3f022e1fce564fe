"""Tagged result returned by :meth:`lockbox.container.codec.ContainerCodec.decode`.

Decoding has exactly one failure kind, :class:`~lockbox.errors.DecryptionFailed`
(or its ``InvalidInput`` subclass). Returning it as a value keeps that visible at
the call site; :meth:`Err.unwrap` turns it back into an exception.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

from lockbox.errors import DecryptionFailed

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: DecryptionFailed

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        # fresh instance so repeated unwraps do not stack tracebacks
        raise type(self.error)(str(self.error)) from None


DecodeResult = Union[Ok[bytes], Err]

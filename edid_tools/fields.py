"""
Bounds-checked primitive readers for fixed-offset EDID fields.

Every reader raises :class:`~.exceptions.OutOfRange` instead of returning partial or garbage data when the requested
span does not fit in the buffer.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from struct import Struct
from typing import Callable, Union

from .exceptions import OutOfRange

__all__ = [
    'u16_le', 'u16_be', 'u32_be', 'byte_at', 'signed_byte_at', 'byte_slice', 'require_length', 'EdidProperty', 'Buffer'
]
log = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview]

_U16_LE = Struct('<H')
_U16_BE = Struct('>H')
_U32_BE = Struct('>I')
_I8 = Struct('b')


def _check(buf: Buffer, offset: int, length: int):
    if offset < 0 or length < 0 or offset + length > len(buf):
        raise OutOfRange(offset, length, len(buf))


def require_length(buf: Buffer, length: int):
    """Raise :class:`OutOfRange` if the buffer is shorter than the given length."""
    if len(buf) < length:
        raise OutOfRange(0, length, len(buf))


def byte_at(buf: Buffer, offset: int) -> int:
    _check(buf, offset, 1)
    return buf[offset]


def signed_byte_at(buf: Buffer, offset: int) -> int:
    """Read a single byte as a two's complement signed value (-128 to 127)."""
    _check(buf, offset, 1)
    return _I8.unpack_from(buf, offset)[0]


def u16_le(buf: Buffer, offset: int) -> int:
    _check(buf, offset, 2)
    return _U16_LE.unpack_from(buf, offset)[0]


def u16_be(buf: Buffer, offset: int) -> int:
    _check(buf, offset, 2)
    return _U16_BE.unpack_from(buf, offset)[0]


def u32_be(buf: Buffer, offset: int) -> int:
    _check(buf, offset, 4)
    return _U32_BE.unpack_from(buf, offset)[0]


def byte_slice(buf: Buffer, start: int, length: int) -> bytes:
    """
    :param buf: The buffer to read from
    :param start: The offset of the first byte to include
    :param length: The number of bytes to include
    :return: A copy of the requested range of bytes
    """
    _check(buf, start, length)
    return bytes(buf[start : start + length])


class EdidProperty:
    """
    Lazily evaluates a decoding function against the data of the instance it is accessed on, and caches the result in
    that instance's ``__dict__`` so later access is a plain attribute lookup.
    """

    __slots__ = ('func', 'name')

    def __init__(self, func: Callable[[Buffer], object]):
        self.func = func

    def __set_name__(self, owner, name: str):
        self.name = name
        owner._properties.add(name)  # noqa

    def __get__(self, instance, owner):
        if instance is None:
            return self

        value = self.func(instance.data)
        instance.__dict__[self.name] = value
        return value

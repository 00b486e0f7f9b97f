"""
Classes that represent the four 18-byte descriptor blocks in an EDID base block.

The first 4 bytes of each descriptor are read as a single big-endian value to determine its type.  Display descriptors
begin with 3 zero bytes, so their type is the tag in the 4th byte.  Detailed timing descriptors begin with a non-zero
pixel clock, which always produces a type value above the range of display descriptor tags.  Zero-prefixed blocks with
a tag that has no dedicated class (such as the 0x10 dummy descriptor) are also treated as detailed timing descriptors,
with a pixel clock of 0.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from typing import Type

from .constants import DESCRIPTOR_OFFSETS, DESCRIPTOR_SIZE, DescriptorTag
from .fields import Buffer, byte_at, byte_slice, require_length, u16_le, u32_be

__all__ = [
    'Descriptor', 'TextDescriptor', 'RangeLimitsDescriptor', 'RawDescriptor', 'DetailedTimingDescriptor',
    'descriptor_type', 'parse_descriptor', 'read_descriptors', 'active_pixels',
]
log = logging.getLogger(__name__)

_TRIM_CHARS = ''.join(map(chr, range(0x21)))  # Control characters, NUL padding, and spaces
_TAG_CLASSES: dict[int, Type[Descriptor]] = {}


def descriptor_type(desc: Buffer) -> int:
    """The first 4 bytes of the given descriptor, interpreted as a big-endian unsigned int."""
    return u32_be(desc, 0)


def active_pixels(buf: Buffer, offset: int = 0) -> tuple[int, int]:
    """
    :param buf: A buffer containing a detailed timing descriptor
    :param offset: The offset of the detailed timing descriptor in the buffer
    :return: Tuple of (horizontal, vertical) active pixels.  The upper 4 bits of bytes 4 and 7 are the upper 4 bits of
      the 12-bit horizontal and vertical values, respectively.
    """
    h_active = byte_at(buf, offset + 2) | ((byte_at(buf, offset + 4) & 0xF0) << 4)
    v_active = byte_at(buf, offset + 5) | ((byte_at(buf, offset + 7) & 0xF0) << 4)
    return h_active, v_active


class Descriptor:
    __slots__ = ('raw', 'offset')
    name: str = 'Descriptor'

    def __init_subclass__(cls, tags=(), name: str = None, **kwargs):
        super().__init_subclass__(**kwargs)
        if name:
            cls.name = name
        for tag in tags:
            _TAG_CLASSES[tag] = cls

    def __init__(self, raw: Buffer, offset: int = None):
        require_length(raw, DESCRIPTOR_SIZE)
        self.raw = bytes(raw[:DESCRIPTOR_SIZE])
        self.offset = offset

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}[type=0x{self.type:02X}, offset={self.offset}]>'

    def __eq__(self, other: Descriptor) -> bool:
        return self.__class__ is other.__class__ and self.raw == other.raw

    def __hash__(self) -> int:
        return hash(self.__class__) ^ hash(self.raw)

    @property
    def type(self) -> int:
        return descriptor_type(self.raw)

    @property
    def tag(self) -> int:
        return self.raw[3]

    @property
    def hex(self) -> str:
        return self.raw.hex().upper()

    def describe(self) -> str:
        return f'{self.name}: {self.hex}'

    def as_dict(self) -> dict[str, object]:
        return {'type': self.name, 'hex': self.hex}


class TextDescriptor(
    Descriptor, tags=(DescriptorTag.SERIAL_NUMBER, DescriptorTag.UNSPECIFIED_TEXT, DescriptorTag.MONITOR_NAME)
):
    __slots__ = ()

    @property
    def name(self) -> str:
        return DescriptorTag(self.tag).label

    @property
    def text(self) -> str:
        """Bytes 4-17 decoded as ASCII, with surrounding whitespace / control chars / NUL padding removed."""
        return self.raw[4:].decode('ascii', 'replace').strip(_TRIM_CHARS)

    def describe(self) -> str:
        return f'{self.name}: {self.text}'

    def as_dict(self) -> dict[str, object]:
        return {'type': self.name, 'text': self.text}


class RangeLimitsDescriptor(Descriptor, tags=(DescriptorTag.RANGE_LIMITS,), name='Range Limits'):
    __slots__ = ()

    @property
    def v_min_hz(self) -> int:
        return self.raw[5]

    @property
    def v_max_hz(self) -> int:
        return self.raw[6]

    @property
    def h_min_hz(self) -> int:
        return self.raw[7]

    @property
    def h_max_hz(self) -> int:
        return self.raw[8]

    @property
    def max_pixel_clock_mhz(self) -> int:
        return self.raw[9] * 10

    def describe(self) -> str:
        return (
            f'{self.name}: Field Rate {self.v_min_hz}-{self.v_max_hz} Hz vertical,'
            f' {self.h_min_hz}-{self.h_max_hz} Hz horizontal, Max clock: {self.max_pixel_clock_mhz} MHz'
        )

    def as_dict(self) -> dict[str, object]:
        return {
            'type': self.name,
            'v_min_hz': self.v_min_hz,
            'v_max_hz': self.v_max_hz,
            'h_min_hz': self.h_min_hz,
            'h_max_hz': self.h_max_hz,
            'max_pixel_clock_mhz': self.max_pixel_clock_mhz,
        }


class RawDescriptor(
    Descriptor,
    tags=(DescriptorTag.WHITE_POINT, DescriptorTag.STANDARD_TIMING_ID, *range(DescriptorTag.MANUFACTURER_MAX + 1)),
):
    """A descriptor that is only reported as a hex dump of its 18 bytes."""

    __slots__ = ()

    @property
    def name(self) -> str:
        if (tag := self.tag) <= DescriptorTag.MANUFACTURER_MAX:
            return DescriptorTag.MANUFACTURER_MAX.label
        return DescriptorTag(tag).label


class DetailedTimingDescriptor(Descriptor, name='Preferred Timing'):
    __slots__ = ()

    @property
    def pixel_clock(self) -> int:
        """The pixel clock in units of 10 kHz"""
        return u16_le(self.raw, 0)

    @property
    def pixel_clock_mhz(self) -> int:
        return self.pixel_clock // 100

    @property
    def h_active(self) -> int:
        return active_pixels(self.raw)[0]

    @property
    def v_active(self) -> int:
        return active_pixels(self.raw)[1]

    @property
    def resolution(self) -> str:
        return '{}x{}'.format(*active_pixels(self.raw))

    def describe(self) -> str:
        return f'{self.name}: Clock {self.pixel_clock_mhz}MHz, Active Pixels {self.resolution}'

    def as_dict(self) -> dict[str, object]:
        return {
            'type': self.name,
            'pixel_clock_mhz': self.pixel_clock_mhz,
            'h_active': self.h_active,
            'v_active': self.v_active,
        }


def parse_descriptor(desc: Buffer, offset: int = None) -> Descriptor:
    """
    :param desc: An 18-byte descriptor
    :param offset: The offset of the descriptor within the EDID base block, if known
    :return: A :class:`Descriptor` subclass instance appropriate for the descriptor's type
    """
    require_length(desc, DESCRIPTOR_SIZE)
    # Anything without a registered tag, including a non-zero pixel clock prefix, is a detailed timing descriptor
    return _TAG_CLASSES.get(descriptor_type(desc), DetailedTimingDescriptor)(desc, offset)


def read_descriptors(buf: Buffer) -> list[Descriptor]:
    """The 4 descriptors that begin at offset 54 in the base block."""
    return [parse_descriptor(byte_slice(buf, offset, DESCRIPTOR_SIZE), offset) for offset in DESCRIPTOR_OFFSETS]

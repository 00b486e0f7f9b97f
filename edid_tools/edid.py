"""
Decoding functions for the fields in an EDID base block, and the :class:`Edid` class that wraps them.

Every function accepts the full EDID buffer and raises :class:`~.exceptions.OutOfRange` if the buffer is shorter than
a full 128-byte base block.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
import re
from functools import cached_property
from pathlib import Path
from typing import Optional, Union

from .config import DecoderConfig
from .constants import BLOCK_SIZE, HEADER, MANUFACTURER_OFFSET, PRODUCT_OFFSET, SERIAL_OFFSET, WEEK_OFFSET
from .constants import YEAR_OFFSET, YEAR_BASE, VERSION_OFFSET, REVISION_OFFSET, VIDEO_INPUT_OFFSET, H_SIZE_OFFSET
from .constants import V_SIZE_OFFSET, DESCRIPTOR_OFFSET, EXTENSION_COUNT_OFFSET, DescriptorTag
from .descriptors import Descriptor, RangeLimitsDescriptor, active_pixels, read_descriptors
from .exceptions import InvalidEdidData
from .fields import Buffer, EdidProperty, byte_at, byte_slice, require_length, signed_byte_at, u16_be, u16_le
from .resolutions import ResolutionSet, supported_resolutions

__all__ = [
    'Edid', 'manufacturer_id', 'product_id', 'serial_number', 'manufacture_week', 'manufacture_year',
    'manufacture_date', 'version', 'version_string', 'is_digital', 'physical_size_cm', 'descriptors', 'model_name',
    'preferred_resolution', 'extension_count',
]
log = logging.getLogger(__name__)

_HEX_JUNK_MATCH = re.compile(r'0x|[\s,:;]', re.IGNORECASE).sub


# region Identity


def manufacturer_id(buf: Buffer) -> str:
    """
    The 2-byte manufacturer ID, unpacked to a 3-char string.  Bit 15 is reserved; the remaining 15 bits are 3x 5-bit
    letters, where 1 = A.  Letters with a value of 0 are omitted.
    """
    require_length(buf, BLOCK_SIZE)
    packed = u16_be(buf, MANUFACTURER_OFFSET)
    chars = ((packed >> 10) & 0x1F, (packed >> 5) & 0x1F, packed & 0x1F)
    return ''.join(chr(64 + c) for c in chars if c)


def product_id(buf: Buffer) -> str:
    require_length(buf, BLOCK_SIZE)
    return f'{u16_le(buf, PRODUCT_OFFSET):x}'


def _alnum_or_hex(value: int) -> str:
    char = chr(value)
    return char if char.isascii() and char.isalnum() else f'{value:02X}'


def serial_number(buf: Buffer) -> str:
    """The 4-byte serial number, in reverse byte order, with each byte as a letter/digit or a 2-digit hex value."""
    require_length(buf, BLOCK_SIZE)
    return ''.join(_alnum_or_hex(b) for b in reversed(byte_slice(buf, SERIAL_OFFSET, 4)))


# endregion

# region Manufacture Date / Version


def manufacture_week(buf: Buffer) -> int:
    """The raw week of manufacture.  0 = unspecified, and 255 indicates that the year is a model year."""
    require_length(buf, BLOCK_SIZE)
    return byte_at(buf, WEEK_OFFSET)


def manufacture_year(buf: Buffer) -> int:
    require_length(buf, BLOCK_SIZE)
    return byte_at(buf, YEAR_OFFSET) + YEAR_BASE


def manufacture_date(buf: Buffer) -> str:
    """The approximate month and year of manufacture, as ``M/YYYY``."""
    month = manufacture_week(buf) * 12 // 52 + 1
    return f'{month}/{manufacture_year(buf)}'


def version(buf: Buffer) -> tuple[int, int]:
    require_length(buf, BLOCK_SIZE)
    return signed_byte_at(buf, VERSION_OFFSET), signed_byte_at(buf, REVISION_OFFSET)


def version_string(buf: Buffer) -> str:
    return '{}.{}'.format(*version(buf))


# endregion

# region Display Parameters


def is_digital(buf: Buffer) -> bool:
    require_length(buf, BLOCK_SIZE)
    return bool(byte_at(buf, VIDEO_INPUT_OFFSET) & 0x80)


def physical_size_cm(buf: Buffer) -> tuple[int, int]:
    """Tuple of (horizontal, vertical) screen size in cm"""
    require_length(buf, BLOCK_SIZE)
    return signed_byte_at(buf, H_SIZE_OFFSET), signed_byte_at(buf, V_SIZE_OFFSET)


def extension_count(buf: Buffer) -> int:
    require_length(buf, BLOCK_SIZE)
    return byte_at(buf, EXTENSION_COUNT_OFFSET)


# endregion

# region Descriptors


def descriptors(buf: Buffer) -> list[Descriptor]:
    require_length(buf, BLOCK_SIZE)
    return read_descriptors(buf)


def model_name(buf: Buffer, last_token: bool = True) -> Optional[str]:
    """
    :param buf: EDID data
    :param last_token: Return only the last whitespace-delimited token of the monitor name (default: True)
    :return: The model name from the first Monitor Name descriptor, or None if there is no such descriptor
    """
    for desc in descriptors(buf):
        if desc.type == DescriptorTag.MONITOR_NAME:
            name = desc.text  # noqa
            if last_token:
                tokens = name.split()
                return tokens[-1] if tokens else ''
            return name

    log.debug('No monitor name descriptor was found')
    return None


def preferred_resolution(buf: Buffer) -> str:
    """The active pixels from the first detailed timing descriptor, as ``WIDTHxHEIGHT``."""
    require_length(buf, BLOCK_SIZE)
    return '{}x{}'.format(*active_pixels(buf, DESCRIPTOR_OFFSET))


# endregion


class Edid:
    _properties = set()
    manufacturer: str = EdidProperty(manufacturer_id)
    product_id: str = EdidProperty(product_id)
    serial_number: str = EdidProperty(serial_number)
    manufacture_week: int = EdidProperty(manufacture_week)
    manufacture_year: int = EdidProperty(manufacture_year)
    manufacture_date: str = EdidProperty(manufacture_date)
    version: tuple[int, int] = EdidProperty(version)
    version_string: str = EdidProperty(version_string)
    is_digital: bool = EdidProperty(is_digital)
    physical_size_cm: tuple[int, int] = EdidProperty(physical_size_cm)
    preferred_resolution: str = EdidProperty(preferred_resolution)
    extension_count: int = EdidProperty(extension_count)

    def __init__(self, data: Buffer, config: DecoderConfig = None):
        require_length(data, BLOCK_SIZE)
        self.data = bytes(data)
        self.config = config or DecoderConfig()

    # region Alternate Constructors

    @classmethod
    def from_raw(cls, data: Buffer, config: DecoderConfig = None) -> Edid:
        """
        :param data: Raw data that contains an EDID block, possibly preceded by other bytes
        :param config: Optional decoder config
        :return: An Edid object that uses the data starting from the EDID header
        """
        if (start := bytes(data).find(HEADER)) < 0:
            raise InvalidEdidData('Invalid EDID data - the EDID header could not be found')
        elif start:
            log.debug(f'Found EDID header at offset={start}')
        return cls(data[start:], config)

    @classmethod
    def from_hex(cls, hex_data: str, config: DecoderConfig = None) -> Edid:
        """
        :param hex_data: Hex-encoded EDID data.  Whitespace, ``0x`` prefixes, and ``,:;`` separators are ignored.
        :param config: Optional decoder config
        :return: An Edid object
        """
        try:
            data = bytes.fromhex(_HEX_JUNK_MATCH('', hex_data))
        except ValueError as e:
            raise InvalidEdidData(f'Invalid hex EDID data: {e}') from e
        return cls(data, config)

    @classmethod
    def from_file(cls, path: Union[str, Path], config: DecoderConfig = None) -> Edid:
        """Load EDID data from a binary file, or from a text file containing a hex dump."""
        path = Path(path).expanduser()
        data = path.read_bytes()
        try:
            text = data.decode('ascii')
        except UnicodeDecodeError:
            log.debug(f'Loading binary EDID data from {path}')
            return cls.from_raw(data, config)
        else:
            log.debug(f'Loading hex EDID data from {path}')
            return cls.from_hex(text, config)

    # endregion

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}[{self.manufacturer} {self.model or self.product_id}]>'

    def __str__(self) -> str:
        from .output.report import format_report

        return format_report(self)

    def __eq__(self, other: Edid) -> bool:
        return self.__class__ is other.__class__ and self.data == other.data

    def __hash__(self) -> int:
        return hash(self.__class__) ^ hash(self.data)

    @cached_property
    def descriptors(self) -> list[Descriptor]:
        return descriptors(self.data)

    @cached_property
    def model(self) -> Optional[str]:
        return model_name(self.data, self.config.model_name_last_token)

    @cached_property
    def range_limits(self) -> Optional[RangeLimitsDescriptor]:
        return next((d for d in self.descriptors if isinstance(d, RangeLimitsDescriptor)), None)

    @cached_property
    def resolutions(self) -> ResolutionSet:
        return supported_resolutions(self.data, self.config)

    def as_dict(self) -> dict[str, object]:
        keys = ['manufacturer', 'model'] + sorted(self._properties - {'manufacturer'})
        info = {key: getattr(self, key) for key in keys}
        info['descriptors'] = [desc.as_dict() for desc in self.descriptors]
        info['resolutions'] = self.resolutions.to_list()
        return info

"""
Exceptions for EDID decoding errors.

:author: Doug Skrypa
"""

from __future__ import annotations

__all__ = ['EdidError', 'OutOfRange', 'MalformedDescriptor', 'InvalidEdidData']


class EdidError(Exception):
    """Base EDID exception"""


class OutOfRange(EdidError, IndexError):
    """Raised when a fixed-offset read would extend past the end of the buffer"""

    def __init__(self, offset: int, length: int, size: int):
        self.offset = offset
        self.length = length
        self.size = size

    def __str__(self) -> str:
        end = self.offset + self.length
        return f'Unable to read {self.length} byte(s) at offset={self.offset} (end={end}) from {self.size} bytes'


class MalformedDescriptor(EdidError):
    """Raised when a CTA-861 data block header would advance past the data block collection or the buffer"""

    def __init__(self, offset: int, message: str):
        self.offset = offset
        self.message = message

    def __str__(self) -> str:
        return f'Malformed data block at offset={self.offset}: {self.message}'


class InvalidEdidData(EdidError, ValueError):
    """Raised when the provided input cannot be interpreted as EDID data"""

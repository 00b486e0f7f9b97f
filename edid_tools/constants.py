"""
Offsets, lookup tables, and descriptor tags used when decoding EDID blocks.

:author: Doug Skrypa
"""

from __future__ import annotations

from enum import IntEnum

# fmt: off
BLOCK_SIZE = 128
HEADER = b'\x00\xff\xff\xff\xff\xff\xff\x00'

MANUFACTURER_OFFSET = 8         # 2 bytes, big-endian, 3x 5-bit letters
PRODUCT_OFFSET = 10             # 2 bytes, little-endian
SERIAL_OFFSET = 12              # 4 bytes
WEEK_OFFSET = 16
YEAR_OFFSET = 17                # year - 1990
VERSION_OFFSET = 18
REVISION_OFFSET = 19
VIDEO_INPUT_OFFSET = 20         # bit 7 = digital
H_SIZE_OFFSET = 21              # cm
V_SIZE_OFFSET = 22              # cm
ESTABLISHED_OFFSET = 0x23       # 3 bytes
STANDARD_OFFSET = 0x26          # 8x 2-byte entries
STANDARD_END = 0x35
DESCRIPTOR_OFFSET = 0x36        # = 54; 4x 18-byte descriptors
DESCRIPTOR_SIZE = 18
DESCRIPTOR_COUNT = 4
EXTENSION_COUNT_OFFSET = 0x7E   # = 126

YEAR_BASE = 1990
UNUSED_STANDARD_TIMING = (0x01, 0x01)

CTA_EXTENSION_TAG = 0x02
CTA_DTD_START_OFFSET = 2        # relative to the start of the extension block
CTA_DATA_BLOCKS_OFFSET = 4      # relative to the start of the extension block
CTA_VIDEO_DATA_BLOCK = 2
# fmt: on

DESCRIPTOR_OFFSETS = tuple(DESCRIPTOR_OFFSET + DESCRIPTOR_SIZE * i for i in range(DESCRIPTOR_COUNT))

# Indexed by bit position; byte 0x23 bits 7..0 map to 0..7, byte 0x24 bits 7..0 map to 8..15
ESTABLISHED_TIMINGS = (
    '720x400',      # 720x400 @ 70 Hz
    '720x400',      # 720x400 @ 88 Hz
    '640x480',      # 640x480 @ 60 Hz
    '640x480',      # 640x480 @ 67 Hz
    '640x480',      # 640x480 @ 72 Hz
    '640x480',      # 640x480 @ 75 Hz
    '800x600',      # 800x600 @ 56 Hz
    '800x600',      # 800x600 @ 60 Hz
    '800x600',      # 800x600 @ 72 Hz
    '800x600',      # 800x600 @ 75 Hz
    '832x624',      # 832x624 @ 75 Hz
    '1024x768',     # 1024x768 @ 87 Hz, interlaced
    '1024x768',     # 1024x768 @ 60 Hz
    '1024x768',     # 1024x768 @ 70 Hz
    '1280x1024',    # VESA lists 1024x768 @ 75 Hz for this bit
    '1152x870',     # VESA lists 1280x1024 @ 75 Hz for this bit; byte 0x25 bit 7 (1152x870 @ 75 Hz) maps here too
)

# Standard timing aspect ratio, selected by the top 2 bits of the second byte
ASPECT_RATIOS = {
    0b00: 16 / 10,
    0b01: 4 / 3,
    0b10: 5 / 4,
    0b11: 16 / 9,
}

# CTA-861 Video Identification Codes
VIC_RESOLUTIONS = {
    1: '640x480',
    2: '720x480',
    3: '720x480',
    4: '1280x720',
    5: '1920x1080i',
    16: '1920x1080',
    17: '720x576',
    18: '720x576',
    19: '1280x720',
    20: '1920x1080i',
    31: '1920x1080',
}


class DescriptorTag(IntEnum):
    # fmt: off
    SERIAL_NUMBER = 0xFF
    UNSPECIFIED_TEXT = 0xFE
    RANGE_LIMITS = 0xFD
    MONITOR_NAME = 0xFC
    WHITE_POINT = 0xFB
    STANDARD_TIMING_ID = 0xFA
    MANUFACTURER_MAX = 0x0F     # 0x00 - 0x0F are manufacturer-specific
    # fmt: on

    @property
    def label(self) -> str:
        return _TAG_LABELS[self]


_TAG_LABELS = {
    DescriptorTag.SERIAL_NUMBER: 'Serial Number',
    DescriptorTag.UNSPECIFIED_TEXT: 'Unspecified Text',
    DescriptorTag.RANGE_LIMITS: 'Range Limits',
    DescriptorTag.MONITOR_NAME: 'Monitor Name',
    DescriptorTag.WHITE_POINT: 'White Point Data',
    DescriptorTag.STANDARD_TIMING_ID: 'Standard Timing ID',
    DescriptorTag.MANUFACTURER_MAX: 'Manufacturer Data',
}

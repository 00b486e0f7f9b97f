"""
Enumerates the resolutions that a monitor advertises as supported.

Four independent encodings are merged, in order:

1. The established timings bitmap (bytes 0x23-0x25)
2. The standard timings table (bytes 0x26-0x35)
3. The detailed timing descriptors (bytes 0x36-0x7D)
4. Video data blocks in the first CTA-861 extension block, if present

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from collections.abc import MutableSet
from math import floor
from typing import Iterable, Iterator

from .constants import BLOCK_SIZE, ESTABLISHED_OFFSET, ESTABLISHED_TIMINGS, STANDARD_OFFSET, STANDARD_END
from .constants import ASPECT_RATIOS, UNUSED_STANDARD_TIMING, DESCRIPTOR_OFFSETS, EXTENSION_COUNT_OFFSET
from .constants import CTA_EXTENSION_TAG, CTA_DTD_START_OFFSET, CTA_DATA_BLOCKS_OFFSET, CTA_VIDEO_DATA_BLOCK
from .config import DecoderConfig
from .constants import VIC_RESOLUTIONS
from .descriptors import active_pixels
from .exceptions import MalformedDescriptor
from .fields import Buffer, byte_at, require_length, u16_le

__all__ = [
    'ResolutionSet', 'established_timings', 'standard_timings', 'detailed_timings', 'cta_video_timings',
    'supported_resolutions',
]
log = logging.getLogger(__name__)


class ResolutionSet(MutableSet):
    """An insertion-ordered set of ``WIDTHxHEIGHT`` strings."""

    __slots__ = ('_data',)

    def __init__(self, resolutions: Iterable[str] = ()):
        self._data = dict.fromkeys(resolutions)

    def __contains__(self, resolution: str) -> bool:
        return resolution in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}[{", ".join(self._data)}]>'

    def __eq__(self, other) -> bool:
        if isinstance(other, ResolutionSet):
            return list(self._data) == list(other._data)
        return super().__eq__(other)

    __hash__ = None

    def add(self, resolution: str):
        self._data[resolution] = None

    def discard(self, resolution: str):
        self._data.pop(resolution, None)

    def update(self, resolutions: Iterable[str]):
        for resolution in resolutions:
            self._data[resolution] = None

    def to_list(self) -> list[str]:
        return list(self._data)

    def __serializable__(self) -> list[str]:
        return self.to_list()


# region Established Timings


def established_timings(buf: Buffer) -> list[str]:
    t1, t2, t3 = (byte_at(buf, ESTABLISHED_OFFSET + i) for i in range(3))
    found = [ESTABLISHED_TIMINGS[i] for i in range(8) if t1 & (0x80 >> i)]
    found.extend(ESTABLISHED_TIMINGS[i + 8] for i in range(8) if t2 & (0x80 >> i))
    if t3 & 0x80:
        found.append(ESTABLISHED_TIMINGS[15])
    return found


# endregion

# region Standard Timings


def _standard_timing(b1: int, b2: int) -> str:
    h_active = (b1 + 31) * 8
    aspect_ratio = ASPECT_RATIOS[(b2 >> 6) & 0x03]
    v_active = floor(h_active / aspect_ratio + 0.5)  # Round half up
    return f'{h_active}x{v_active}'


def standard_timings(buf: Buffer) -> list[str]:
    found = []
    for offset in range(STANDARD_OFFSET, STANDARD_END + 1, 2):
        pair = (byte_at(buf, offset), byte_at(buf, offset + 1))
        if pair == UNUSED_STANDARD_TIMING:
            continue
        found.append(_standard_timing(*pair))
    return found


# endregion

# region Detailed Timings


def detailed_timings(buf: Buffer, config: DecoderConfig = None) -> list[str]:
    if config is None:
        config = DecoderConfig()
    min_width, min_height, max_size = config.dtd_min_width, config.dtd_min_height, config.dtd_max_size

    found = []
    for offset in DESCRIPTOR_OFFSETS:
        if not u16_le(buf, offset):
            log.debug(f'Skipping descriptor slot at {offset=} with pixel clock=0')
            continue

        h_active, v_active = active_pixels(buf, offset)
        if min_width < h_active < max_size and min_height < v_active < max_size:
            found.append(f'{h_active}x{v_active}')
        else:
            log.debug(f'Ignoring descriptor slot at {offset=} with active pixels={h_active}x{v_active}')
    return found


# endregion

# region CTA-861 Extension


def _iter_data_blocks(buf: Buffer, base: int) -> Iterator[tuple[int, int, int]]:
    """
    Yields (tag, payload offset, payload length) tuples for each data block in the data block collection of the
    CTA-861 extension block that starts at the given base offset.
    """
    end = base + byte_at(buf, base + CTA_DTD_START_OFFSET)
    offset = base + CTA_DATA_BLOCKS_OFFSET
    while offset < end:
        if offset >= len(buf):
            raise MalformedDescriptor(offset, f'the data block collection end={end} is past the end of the data')
        header = byte_at(buf, offset)
        tag, length = header >> 5, header & 0x1F
        if (next_offset := offset + 1 + length) > end:
            raise MalformedDescriptor(offset, f'{tag=} {length=} extends past the data block collection end={end}')
        elif next_offset > len(buf):
            raise MalformedDescriptor(offset, f'{tag=} {length=} extends past the end of the data')
        yield tag, offset + 1, length
        offset = next_offset


def cta_video_timings(buf: Buffer, config: DecoderConfig = None) -> list[str]:
    """
    Resolutions from the Video Data Blocks in the first CTA-861 extension block.  Only the first extension block is
    processed, even when more are declared.
    """
    if len(buf) < BLOCK_SIZE * 2 or not (count := byte_at(buf, EXTENSION_COUNT_OFFSET)):
        return []

    base = BLOCK_SIZE
    if (ext_tag := byte_at(buf, base)) != CTA_EXTENSION_TAG:
        log.debug(f'Skipping extension block with tag=0x{ext_tag:02X} ({count=})')
        return []

    found = []
    try:
        for tag, offset, length in _iter_data_blocks(buf, base):
            if tag != CTA_VIDEO_DATA_BLOCK:
                continue
            for vic_offset in range(offset, offset + length):
                vic = byte_at(buf, vic_offset) & 0x7F  # bit 7 = native format flag
                if resolution := VIC_RESOLUTIONS.get(vic):
                    found.append(resolution)
                else:
                    log.debug(f'Ignoring unhandled {vic=}')
    except MalformedDescriptor as e:
        if config is not None and config.strict_cta:
            raise
        log.warning(f'Stopped processing CTA-861 extension block: {e}')
    return found


# endregion


def supported_resolutions(buf: Buffer, config: DecoderConfig = None) -> ResolutionSet:
    """
    :param buf: EDID data (at least 128 bytes, optionally followed by extension blocks)
    :param config: Optional :class:`~.config.DecoderConfig` with detailed timing bounds / CTA strictness
    :return: The deduplicated set of resolutions from all sources, in the order they were found
    """
    require_length(buf, BLOCK_SIZE)
    resolutions = ResolutionSet(established_timings(buf))
    resolutions.update(standard_timings(buf))
    resolutions.update(detailed_timings(buf, config))
    resolutions.update(cta_video_timings(buf, config))
    return resolutions

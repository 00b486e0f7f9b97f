"""
Library for decoding monitor EDID (Extended Display Identification Data) blocks.

:author: Doug Skrypa
"""

from .edid import Edid
from .exceptions import EdidError, OutOfRange, MalformedDescriptor, InvalidEdidData

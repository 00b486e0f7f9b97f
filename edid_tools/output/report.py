"""
Human-readable EDID summary report.

:author: Doug Skrypa
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..edid import Edid

__all__ = ['format_report']

CM_PER_INCH = 2.54


def format_report(edid: Edid, resolutions: bool = False, indent: str = '  ') -> str:
    """
    :param edid: The :class:`~..edid.Edid` to summarize
    :param resolutions: Include the supported resolutions after the descriptors
    :param indent: The prefix to use for each line
    :return: A multi-line summary of the identity, size, and descriptors in the given EDID
    """
    h_size, v_size = edid.physical_size_cm
    lines = [
        (
            f'Manuf. ID={edid.manufacturer}, Product ID={edid.product_id}'
            f', {"Digital" if edid.is_digital else "Analog"}, Serial={edid.serial_number}'
            f', ManufDate={edid.manufacture_date}, EDID v{edid.version_string}'
        ),
        f'{h_size} x {v_size} cm ({h_size / CM_PER_INCH:.1f} x {v_size / CM_PER_INCH:.1f} in)',
    ]
    lines.extend(desc.describe() for desc in edid.descriptors)
    if resolutions:
        lines.append(f'Supported Resolutions: {", ".join(edid.resolutions)}')
    return '\n'.join(indent + line for line in lines)

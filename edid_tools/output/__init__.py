"""
Output formatting package.

:author: Doug Skrypa
"""

from importlib import import_module
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .color import colored
    from .printer import Printer, PRINTER_FORMATS
    from .report import format_report

__attr_module_map = {
    # color
    'colored': 'color',
    # printer
    'Printer': 'printer',
    'PRINTER_FORMATS': 'printer',
    # report
    'format_report': 'report',
}

# noinspection PyUnresolvedReferences
__all__ = ['color', 'printer', 'report']
__all__.extend(__attr_module_map.keys())


def __dir__():
    return sorted(__all__ + list(globals().keys()))


def __getattr__(name):
    try:
        module_name = __attr_module_map[name]
    except KeyError:
        raise AttributeError(f'module {__name__!r} has no attribute {name!r}')
    else:
        module = import_module(f'.{module_name}', __name__)
        return getattr(module, name)

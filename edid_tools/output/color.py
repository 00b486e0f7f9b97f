"""
ANSI Color Handling

:author: Doug Skrypa
"""

from typing import Union, Any, Iterable

__all__ = ['colored', 'InvalidAnsiCode']

C = Union[str, int]
Attrs = Union[C, Iterable[C]]

FG_PREFIX = '38;5;'
BG_PREFIX = '48;5;'
ANSI_COLORS = {
    'black': 0, 'red': 1, 'green': 2, 'yellow': 3, 'blue': 4, 'magenta': 5, 'cyan': 6, 'white': 7, 'grey': 8,
    'light_red': 9, 'light_green': 10, 'light_yellow': 11, 'light_blue': 12, 'light_magenta': 13, 'light_cyan': 14,
}
ANSI_ATTRS = {'bold': '\x1b[1m', 'dim': '\x1b[2m', 'underlined': '\x1b[4m', 'blink': '\x1b[5m', 'reverse': '\x1b[7m'}


def colored(text: Any, color: C = None, bg_color: C = None, attrs: Attrs = None, reset: bool = True) -> str:
    if not text:
        return ''
    if color is bg_color is attrs is None:
        return text if isinstance(text, str) else str(text)
    parts = (
        ansi_color_code(color, FG_PREFIX) if color is not None else '',
        ansi_color_code(bg_color, BG_PREFIX) if bg_color is not None else '',
        attr_code(attrs) if attrs is not None else '',
        str(text) if not isinstance(text, str) else text,
        '\x1b[0m' if reset else '',
    )
    return ''.join(parts)


def attr_code(attr: Attrs) -> str:
    if isinstance(attr, str):
        attr = (attr,)
    try:
        return ''.join(ANSI_ATTRS[a] for a in attr)
    except (KeyError, TypeError) as e:
        raise InvalidAnsiCode(attr) from e


def ansi_color_code(color: C, base: str) -> str:
    if isinstance(color, int) or (isinstance(color, str) and color.isdigit()):
        color_num = int(color)
        if not 0 <= color_num <= 255:
            raise InvalidAnsiCode(color)
    else:
        try:
            color_num = ANSI_COLORS[color.lower()]
        except (KeyError, AttributeError) as e:
            raise InvalidAnsiCode(color) from e
    return f'\x1b[{base}{color_num}m'


class InvalidAnsiCode(ValueError):
    """Exception to be raised when an invalid ANSI color/attribute code is selected"""

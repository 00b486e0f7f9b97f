"""
The Printer class and helper functions for it.  Provides a centralized interface for serializing decoded EDID data in a
way that users may choose the output format of scripts at runtime.

:author: Doug Skrypa
"""

import json
import logging
import pprint
import types
from collections.abc import Mapping, Sized, Iterable, Container
from typing import Any, Iterator

from ..serialization import PermissiveJSONEncoder, prep_for_yaml, yaml_dump

__all__ = ['Printer', 'PRINTER_FORMATS', 'format_tiered']
log = logging.getLogger(__name__)

PRINTER_FORMATS = ['json', 'json-pretty', 'json-compact', 'text', 'yaml', 'pprint', 'plain']

_FORMAT_HANDLERS = {}


def format_handler(name: str):
    def register_format_handler(func):
        _FORMAT_HANDLERS[name] = func
        return func
    return register_format_handler


def format_tiered(obj: Any, indent: int = 0) -> Iterator[str]:
    prefix = ' ' * indent
    if isinstance(obj, Mapping):
        for key, val in obj.items():
            if isinstance(val, (Mapping, list, tuple)) and val:
                yield f'{prefix}{key}:'
                yield from format_tiered(val, indent + 4)
            else:
                yield f'{prefix}{key}: {val}'
    elif isinstance(obj, (list, tuple)):
        for val in obj:
            if isinstance(val, Mapping):
                yield from format_tiered(val, indent)
                yield ''
            else:
                yield f'{prefix}- {val}'
    else:
        yield f'{prefix}{obj}'


class Printer:
    __slots__ = ('output_format',)
    handlers = _FORMAT_HANDLERS
    formats = PRINTER_FORMATS

    def __init__(self, output_format: str):
        if output_format is None or output_format in Printer.formats:
            self.output_format = output_format
        else:
            raise ValueError(f'Invalid output format={output_format!r} (valid options: {self.formats})')

    def pformat(self, content, *args, **kwargs):
        if isinstance(content, types.GeneratorType):
            return '\n'.join(self.pformat(c, *args, **kwargs) for c in content)
        try:
            handler = self.handlers[self.output_format]
        except KeyError:
            return content
        else:
            return handler(self, content, *args, **kwargs)

    def pprint(self, content, *args, gen_empty_error=None, **kwargs):
        if isinstance(content, types.GeneratorType):
            i = 0
            for c in content:
                self.pprint(c, *args, **kwargs)
                i += 1

            if (i == 0) and gen_empty_error:
                log.error(gen_empty_error)
        else:
            print(self.pformat(content, *args, **kwargs))

    @format_handler('json-compact')
    def jsonc(self, content, *args, **kwargs):
        return json.dumps(content, separators=(',', ':'), cls=PermissiveJSONEncoder, ensure_ascii=False)

    @format_handler('json')
    def json(self, content, *args, **kwargs):
        return json.dumps(content, cls=PermissiveJSONEncoder, ensure_ascii=False)

    @format_handler('json-pretty')
    def jsonp(self, content, *args, **kwargs):
        return json.dumps(content, sort_keys=True, indent=4, cls=PermissiveJSONEncoder, ensure_ascii=False)

    @format_handler('text')
    def text(self, content, *args, **kwargs):
        return '\n'.join(format_tiered(prep_for_yaml(content))).rstrip()

    @format_handler('plain')
    def plain(self, content, *args, **kwargs):
        content = prep_for_yaml(content)
        if isinstance(content, str):
            return content
        elif isinstance(content, Mapping):
            return '\n'.join(f'{k}: {v}' for k, v in content.items())
        elif all(isinstance(content, abc_type) for abc_type in (Sized, Iterable, Container)):
            return '\n'.join(map(str, content))
        else:
            return str(content)

    @format_handler('yaml')
    def yaml(self, content, *args, **kwargs):
        return yaml_dump(
            content,
            kwargs.pop('force_single_yaml', True),
            kwargs.pop('indent_nested_lists', True),
            sort_keys=kwargs.pop('sort_keys', False),
        )

    @format_handler('pprint')
    def pprint_format(self, content, *args, **kwargs):
        return pprint.pformat(prep_for_yaml(content), sort_dicts=False)


del _FORMAT_HANDLERS

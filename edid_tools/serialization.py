"""
Helpers for serializing decoded EDID data to JSON or YAML

:author: Doug Skrypa
"""

import json
from collections.abc import Mapping, KeysView, ValuesView, Set

import yaml

__all__ = ['IndentedYamlDumper', 'PermissiveJSONEncoder', 'prep_for_yaml', 'yaml_dump']


class PermissiveJSONEncoder(json.JSONEncoder):
    def default(self, o):
        if hasattr(o, '__serializable__'):
            return o.__serializable__()
        elif hasattr(o, 'as_dict'):
            return o.as_dict()
        elif isinstance(o, (set, frozenset, KeysView)):
            return sorted(o)
        elif isinstance(o, ValuesView):
            return list(o)
        elif isinstance(o, Mapping):
            return dict(o)
        elif isinstance(o, (bytes, bytearray, memoryview)):
            return bytes(o).hex()
        return super().default(o)


class IndentedYamlDumper(yaml.SafeDumper):
    """This indents lists that are nested in dicts in the same way as the Perl yaml library"""
    def increase_indent(self, flow=False, indentless=False):
        return super().increase_indent(flow, False)


def prep_for_yaml(obj):
    if hasattr(obj, '__serializable__'):
        obj = obj.__serializable__()
    elif hasattr(obj, 'as_dict'):
        obj = obj.as_dict()

    # noinspection PyTypeChecker
    if isinstance(obj, Mapping):
        return {prep_for_yaml(k): prep_for_yaml(v) for k, v in obj.items()}
    elif isinstance(obj, (set, frozenset, KeysView)):
        return [prep_for_yaml(v) for v in sorted(obj)]
    elif isinstance(obj, Set):
        return [prep_for_yaml(v) for v in obj]
    elif isinstance(obj, (list, tuple, map, ValuesView)):
        return [prep_for_yaml(v) for v in obj]
    elif isinstance(obj, (bytes, bytearray, memoryview)):
        return bytes(obj).hex()
    else:
        return obj


def yaml_dump(data, force_single_yaml=False, indent_nested_lists=False, default_flow_style=None, **kwargs):
    """
    Serialize the given data as YAML

    :param data: Data structure to be serialized
    :param bool force_single_yaml: Force a single YAML document to be created instead of multiple ones when the
      top-level data structure is not a dict
    :param bool indent_nested_lists: Indent lists that are nested in dicts in the same way as the Perl yaml library
    :return str: Yaml-formatted data
    """
    content = prep_for_yaml(data)
    kwargs.setdefault('explicit_start', True)
    kwargs.setdefault('width', float('inf'))
    kwargs.setdefault('allow_unicode', True)
    if indent_nested_lists:
        kwargs['Dumper'] = IndentedYamlDumper

    if isinstance(content, (dict, str)) or force_single_yaml:
        kwargs.setdefault('default_flow_style', False if default_flow_style is None else default_flow_style)
        formatted = yaml.dump(content, **kwargs)
    else:
        kwargs.setdefault('default_flow_style', True if default_flow_style is None else default_flow_style)
        formatted = yaml.dump_all(content, **kwargs)
    if formatted.endswith('...\n'):
        formatted = formatted[:-4]
    if formatted.endswith('\n'):
        formatted = formatted[:-1]
    return formatted

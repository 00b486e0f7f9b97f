"""
Configuration for the EDID decoder.

The :class:`ConfigSection` class is intended to be used as a base class for configuration classes, and the
:class:`ConfigItem` descriptor is intended to be used to define each configurable option in subclasses of ConfigSection.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from collections import ChainMap
from pathlib import Path
from typing import Union, TypeVar, Callable, Iterable, Any, Mapping, Generic, Type, overload

import yaml

__all__ = [
    'ConfigItem', 'ConfigSection', 'DecoderConfig', 'ConfigException', 'InvalidConfigError', 'MissingConfigItemError'
]
log = logging.getLogger(__name__)

CV = TypeVar('CV')
DV = TypeVar('DV')
ConfigValue = Union[CV, DV]
ConfigMap = Union[Mapping[str, Any], 'ConfigSection', None]

_NotSet = object()


class ConfigItem(Generic[CV, DV]):
    __slots__ = ('name', 'type', 'default', 'default_func')

    def __init__(
        self, default: DV = _NotSet, type: Callable[..., CV] = None, default_func: Callable[[], DV] = None  # noqa
    ):
        self.type = type
        self.default = default
        self.default_func = default_func

    def __set_name__(self, owner: Type[ConfigSection], name: str):
        self.name = name
        owner._config_items_[name] = self

    @overload
    def __get__(self, instance: None, owner: Type[ConfigSection]) -> ConfigItem[CV, DV]:
        ...

    @overload
    def __get__(self, instance: ConfigSection, owner: Type[ConfigSection]) -> ConfigValue:
        ...

    def __get__(self, instance, owner):
        try:
            return instance.__dict__[self.name]
        except AttributeError:  # instance is None
            return self
        except KeyError as e:
            if self.default is not _NotSet:
                return self.default
            elif self.default_func is not None:
                instance.__dict__[self.name] = value = self.default_func()
                return value
            raise MissingConfigItemError(self.name) from e

    def __set__(self, instance: ConfigSection, value: ConfigValue):
        if self.type is not None:
            try:
                value = self.type(value)
            except (TypeError, ValueError) as e:
                raise InvalidConfigError(f'Invalid value for {self.name}={value!r}: {e}') from e
        instance.__dict__[self.name] = value

    def __delete__(self, instance: ConfigSection):
        try:
            del instance.__dict__[self.name]
        except KeyError as e:
            raise AttributeError(f'No {self.name!r} config was stored for {instance}') from e

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}({self.default!r}, type={self.type!r})>'


class ConfigMeta(type):
    """
    Metaclass for ConfigSections.  Necessary to initialize the ``_config_items_`` dict for ConfigItem registration
    because the contents of a class is evaluated before ``__init_subclass__`` is called.
    """

    _config_items_: dict[str, ConfigItem]

    @classmethod
    def __prepare__(mcs, name: str, bases: Iterable[type], **kwargs) -> dict[str, Any]:
        """Called before ``__new__`` and before evaluating the contents of a class."""
        config_items = {}
        for base in bases:
            if isinstance(base, mcs):
                config_items.update(base._config_items_)
        return {'_config_items_': config_items}


class ConfigSection(metaclass=ConfigMeta):
    _config_items_: dict[str, ConfigItem]

    def __init__(self, config: ConfigMap = None, **kwargs):
        self._update_(config, **kwargs)

    def __repr__(self) -> str:
        settings = ', '.join(f'{key}={val!r}' for key, val in sorted(self.__dict__.items()))
        return f'<{self.__class__.__name__}({settings})>'

    def _update_(self, config: ConfigMap = None, **kwargs):
        """
        Update this section with the given content.  If any of the provided keys are not expected, then an
        :class:`InvalidConfigError` will be raised, and no values will be changed.

        :param config: A dict or other mapping containing values that should be used in this section
        :param kwargs: Additional keyword arguments for values that should be used in this section
        """
        if isinstance(config, ConfigSection):
            config = config.__dict__
        if not (config_map := ChainMap(kwargs, config) if config and kwargs else (config or kwargs)):
            return
        if bad := set(config_map).difference(self._config_items_):
            raise InvalidConfigError(f'Invalid configuration - unsupported options: {", ".join(sorted(bad))}')
        for key, val in config_map.items():
            setattr(self, key, val)

    update = _update_

    def __contains__(self, key: str) -> bool:
        """True if the given key is a config item in this section, and it has a non-default value."""
        return key in self.__dict__

    def __getitem__(self, key: str):
        if key not in self._config_items_:
            raise KeyError(key)
        return getattr(self, key)

    def __setitem__(self, key: str, value: Any):
        if key not in self._config_items_:
            raise KeyError(key)
        setattr(self, key, value)

    def _as_dict_(self, include_defaults: bool = True) -> dict[str, Any]:
        keys = self._config_items_ if include_defaults else self.__dict__
        return {key: getattr(self, key) for key in keys}

    as_dict = _as_dict_


def _to_bool(value: Union[bool, str, int]) -> bool:
    if isinstance(value, str):
        value = value.strip().lower()
        if value in ('true', 'yes', 'on', '1'):
            return True
        elif value in ('false', 'no', 'off', '0', ''):
            return False
        raise ValueError(f'expected a boolean value, but found {value!r}')
    return bool(value)


def _non_negative_int(value: Union[int, str]) -> int:
    if (value := int(value)) < 0:
        raise ValueError('the value must be 0 or greater')
    return value


class DecoderConfig(ConfigSection):
    # Detailed timing descriptor slots are only reported as resolutions when min < active < max
    dtd_min_width: int = ConfigItem(300, _non_negative_int)
    dtd_min_height: int = ConfigItem(200, _non_negative_int)
    dtd_max_size: int = ConfigItem(8000, _non_negative_int)
    # Raise MalformedDescriptor for invalid CTA-861 data blocks instead of stopping with a warning
    strict_cta: bool = ConfigItem(False, _to_bool)
    # Report only the last whitespace-delimited token of the monitor name descriptor as the model name
    model_name_last_token: bool = ConfigItem(True, _to_bool)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> DecoderConfig:
        """
        Load config from a YAML or JSON file.  Settings may be at the top level of the file, or nested under an
        ``edid`` key.
        """
        path = Path(path).expanduser()
        log.debug(f'Loading config from {path}')
        try:
            with path.open('r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InvalidConfigError(f'Invalid configuration file {path}: {e}') from e

        if data is None:
            return cls()
        elif not isinstance(data, Mapping):
            raise InvalidConfigError(f'Invalid configuration file {path} - expected a mapping, found {type(data)}')
        return cls(data.get('edid', data))


# region Exceptions


class ConfigException(Exception):
    """Base exception for config-related errors"""


class InvalidConfigError(ConfigException):
    """Raised when invalid config items are provided when initializing a ConfigSection"""


class MissingConfigItemError(ConfigException):
    """Raised if a required config item is accessed when no value was provided for it"""


# endregion

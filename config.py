"""
Config module.

This module is part of the Mail Admin Panel project.

The configuration is loaded once at startup with :func:`load` and handed to
every component as an :class:`AdminConfig`. Nothing reads it from a global.
"""

# config.py
import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, NamedTuple, Optional, Tuple

import settings
from config_file import Source, describe_source, read_source
from errors import (
    ConfigurationError,
    InvalidDefaultError,
    InvalidValueError,
    MissingDependentKeyError,
    UnknownKeyError,
)
from settings import SETTINGS, Setting

logger = logging.getLogger(__name__)

AFFIRMATIVE = 'YES'
NEGATIVE = 'NO'

REDACTED = '********'

GATE_MESSAGE = (
    "Setting 'configured' is still false. Review every setting (the database "
    "settings in particular), then set 'configured' to true to start the admin panel."
)


class Unlimited:
    """``alias_goto_limit`` of 0: every destination is shown."""

    __slots__ = ()
    bounded = False

    def visible(self, destinations: Iterable[str]) -> Tuple[List[str], int]:
        return list(destinations), 0

    def __eq__(self, other):
        return isinstance(other, Unlimited)

    def __hash__(self):
        return hash(Unlimited)

    def __repr__(self):
        return 'Unlimited()'


class Bounded(NamedTuple):
    """Show at most ``limit`` destinations, the rest as "and N more"."""
    limit: int

    bounded = True

    def visible(self, destinations: Iterable[str]) -> Tuple[List[str], int]:
        destinations = list(destinations)
        return destinations[:self.limit], max(0, len(destinations) - self.limit)


UNLIMITED = Unlimited()


class MailboxSubdirs(NamedTuple):
    folders: Tuple[str, ...]
    host: str
    port: Optional[int] = None
    options: Tuple[str, ...] = ()


class CustomIndicator(NamedTuple):
    domain: str
    color: str


class DatabaseSettings(NamedTuple):
    type: str
    host: str
    user: str
    password: str
    name: str
    prefix: str

    def __repr__(self):
        return (f"DatabaseSettings(type={self.type!r}, host={self.host!r}, user={self.user!r}, "
                f"password={REDACTED!r}, name={self.name!r}, prefix={self.prefix!r})")


# Decoders. Each takes the declaration and the raw value and returns the typed value.

def _invalid(setting: Setting, value: Any, expected: str) -> InvalidValueError:
    return InvalidValueError(
        f"Setting '{setting.key}' must be {expected}, not {value!r}",
        setting.key,
        value,
    )


def _decode_flag(setting: Setting, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value == AFFIRMATIVE:
        return True
    if value == NEGATIVE:
        return False
    raise _invalid(setting, value, f"'{AFFIRMATIVE}' or '{NEGATIVE}'")


def _decode_gate(setting: Setting, value: Any) -> bool:
    if isinstance(value, str) and value.lower() in ('true', 'false'):
        return value.lower() == 'true'
    try:
        return _decode_flag(setting, value)
    except InvalidValueError:
        raise _invalid(setting, value, "true or false") from None


def _decode_string(setting: Setting, value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise _invalid(setting, value, "a string")
    return str(value)


def _decode_required_string(setting: Setting, value: Any) -> str:
    value = _decode_string(setting, value)
    if not value.strip():
        raise _invalid(setting, value, "a non-empty string")
    return value


def _decode_choice(setting: Setting, value: Any) -> str:
    if value not in setting.choices:
        raise _invalid(setting, value, "one of " + ', '.join(repr(c) for c in setting.choices))
    return value


def _decode_integer(setting: Setting, value: Any) -> int:
    if isinstance(value, bool):
        raise _invalid(setting, value, "an integer")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise _invalid(setting, value, "an integer") from None
    if not isinstance(value, int):
        raise _invalid(setting, value, "an integer")

    if setting.choices and value not in setting.choices:
        raise _invalid(setting, value, "one of " + ', '.join(str(c) for c in setting.choices))
    if setting.minimum is not None and value < setting.minimum:
        raise _invalid(setting, value, f"at least {setting.minimum}")
    if setting.maximum is not None and value > setting.maximum:
        raise _invalid(setting, value, f"at most {setting.maximum}")
    return value


def _decode_list(setting: Setting, value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise _invalid(setting, value, "a list of strings")
    for item in value:
        if not isinstance(item, str):
            raise _invalid(setting, value, "a list of strings")
    return tuple(value)


def _decode_map(setting: Setting, value: Any) -> Mapping[str, str]:
    if not isinstance(value, Mapping):
        raise _invalid(setting, value, "a mapping of strings")
    for name, target in value.items():
        if not isinstance(name, str) or not isinstance(target, str):
            raise _invalid(setting, value, "a mapping of strings")
    return MappingProxyType(dict(value))


def _decode_tables(setting: Setting, value: Any) -> Mapping[str, str]:
    if not isinstance(value, Mapping):
        raise _invalid(setting, value, "a mapping of logical to physical table names")

    # Overrides replace single entries; the rest keep their defaults.
    tables = dict(setting.default)
    for name, physical in value.items():
        if name not in tables:
            raise InvalidValueError(
                f"Setting '{setting.key}' names unknown table '{name}'; "
                f"known tables are {', '.join(settings.TABLE_NAMES)}",
                setting.key,
                name,
            )
        if not isinstance(physical, str) or not physical.strip():
            raise _invalid(setting, physical, f"a non-empty table name for '{name}'")
        tables[name] = physical

    seen = {}
    for name, physical in tables.items():
        if physical in seen:
            raise InvalidValueError(
                f"Setting '{setting.key}' maps both '{seen[physical]}' and '{name}' to table '{physical}'",
                setting.key,
                physical,
            )
        seen[physical] = name
    return MappingProxyType(tables)


def _decode_goto_limit(setting: Setting, value: Any):
    limit = _decode_integer(setting._replace(minimum=0), value)
    if limit == 0:
        return UNLIMITED
    return Bounded(limit)


def _optional(decoder):
    def decode(setting: Setting, value: Any):
        if value is None:
            return None
        return decoder(setting, value)
    return decode


DECODERS = {
    settings.GATE: _decode_gate,
    settings.FLAG: _decode_flag,
    settings.STRING: _decode_string,
    settings.REQUIRED_STRING: _decode_required_string,
    settings.CHOICE: _decode_choice,
    settings.INTEGER: _decode_integer,
    settings.LIST: _decode_list,
    settings.MAP: _decode_map,
    settings.TABLES: _decode_tables,
    settings.GOTO_LIMIT: _decode_goto_limit,
    settings.OPTIONAL_STRING: _optional(_decode_required_string),
    settings.OPTIONAL_INTEGER: _optional(_decode_integer),
    settings.OPTIONAL_LIST: _optional(_decode_list),
}


def decode(setting: Setting, value: Any) -> Any:
    return DECODERS[setting.kind](setting, value)


# Checks spanning more than one setting.

def _check_dependent_groups(values: Mapping[str, Any]) -> None:
    for group in settings.DEPENDENT_GROUPS:
        if values[group.primary] is not None:
            for dependent in group.required:
                if values[dependent] is None:
                    raise MissingDependentKeyError(group.primary, dependent)
        else:
            for dependent in group.dependents:
                if values[dependent] is not None:
                    raise InvalidValueError(
                        f"Setting '{dependent}' has no effect unless '{group.primary}' is defined",
                        dependent,
                        values[dependent],
                    )


def _check_default_membership(values: Mapping[str, Any]) -> None:
    for default_key, options_key in settings.DEFAULT_MEMBERSHIP:
        if values[default_key] not in values[options_key]:
            raise InvalidDefaultError(default_key, values[default_key], options_key, values[options_key])


def _check_correlated_lists(values: Mapping[str, Any]) -> None:
    for domains_key, colors_key, count_key in settings.CORRELATED_LISTS:
        domains, colors = values[domains_key], values[colors_key]
        if len(domains) != len(colors):
            raise InvalidValueError(
                f"Settings '{domains_key}' and '{colors_key}' must have the same length "
                f"({len(domains)} != {len(colors)})",
                colors_key,
                colors,
            )
        if values[count_key] > len(domains):
            raise InvalidValueError(
                f"Setting '{count_key}' is {values[count_key]} but only {len(domains)} "
                f"entries are listed in '{domains_key}'",
                count_key,
                values[count_key],
            )


def _plain(value: Any) -> Any:
    if isinstance(value, tuple) and not isinstance(value, Bounded):
        return list(value)
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, Bounded):
        return value.limit
    if isinstance(value, Unlimited):
        return 0
    return value


class AdminConfig:
    """Immutable, fully validated set of admin panel settings."""

    __slots__ = ('_values', 'source')

    def __init__(self, values: Mapping[str, Any], source: Optional[str] = None):
        object.__setattr__(self, '_values', MappingProxyType(dict(values)))
        object.__setattr__(self, 'source', source)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is read-only")

    def get(self, key: str) -> Any:
        if key not in SETTINGS:
            raise UnknownKeyError(key)
        return self._values[key]

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __contains__(self, key) -> bool:
        return key in SETTINGS

    def __iter__(self) -> Iterator[str]:
        return iter(SETTINGS)

    def __len__(self) -> int:
        return len(SETTINGS)

    def __repr__(self):
        return f"<AdminConfig source={self.source!r} configured={self.configured}>"

    @property
    def configured(self) -> bool:
        return self._values['configured']

    @property
    def database(self) -> DatabaseSettings:
        return DatabaseSettings(
            type=self._values['database_type'],
            host=self._values['database_host'],
            user=self._values['database_user'],
            password=self._values['database_password'],
            name=self._values['database_name'],
            prefix=self._values['database_prefix'],
        )

    def table(self, logical_name: str) -> str:
        """Physical name of a logical table, prefix included."""
        tables = self._values['database_tables']
        if logical_name not in tables:
            raise UnknownKeyError(logical_name)
        return self._values['database_prefix'] + tables[logical_name]

    @property
    def goto_limit(self):
        return self._values['alias_goto_limit']

    @property
    def mailbox_subdirs(self) -> Optional[MailboxSubdirs]:
        folders = self._values['create_mailbox_subdirs']
        if folders is None:
            return None
        return MailboxSubdirs(
            folders=folders,
            host=self._values['create_mailbox_subdirs_host'],
            port=self._values['create_mailbox_subdirs_hostport'],
            options=self._values['create_mailbox_subdirs_hostoptions'] or (),
        )

    @property
    def custom_indicators(self) -> Tuple[CustomIndicator, ...]:
        count = self._values['show_custom_count']
        pairs = zip(self._values['show_custom_domains'], self._values['show_custom_colors'])
        return tuple(CustomIndicator(domain, color) for domain, color in pairs)[:count]

    def custom_color_for(self, address: str) -> Optional[str]:
        domain = address.rsplit('@', 1)[-1].lower()
        for indicator in self.custom_indicators:
            if domain == indicator.domain.lower():
                return indicator.color
        return None

    def group(self, name: str) -> Dict[str, Any]:
        return {key: self._values[key] for key, setting in SETTINGS.items() if setting.group == name}

    def as_dict(self, redact: bool = True) -> Dict[str, Any]:
        snapshot = {}
        for key in SETTINGS:
            value = _plain(self._values[key])
            if redact and key in settings.SECRET_KEYS and value:
                value = REDACTED
            snapshot[key] = value
        return snapshot


def load(source: Source = None) -> AdminConfig:
    """
    Build the configuration from the declared defaults and the operator overrides.

    Every value is decoded and validated first; only a fully valid
    configuration is checked against the ``configured`` gate.

    Raises:
        UnknownKeyError: the overrides contain an undeclared key
        InvalidValueError: a value is malformed (including its subclasses
            InvalidDefaultError and MissingDependentKeyError)
        ConfigurationError: the source is unreadable or the gate is closed
    """
    overrides = read_source(source)

    for key in overrides:
        if key not in SETTINGS:
            raise UnknownKeyError(key)

    values = {}
    for setting in settings.DECLARATIONS:
        raw = overrides[setting.key] if setting.key in overrides else setting.default
        values[setting.key] = decode(setting, raw)

    _check_dependent_groups(values)
    _check_default_membership(values)
    _check_correlated_lists(values)

    if not values['configured']:
        raise ConfigurationError(GATE_MESSAGE, 'configured')

    config = AdminConfig(values, source=describe_source(source))
    logger.info(
        "Configuration loaded from %s (%d overrides): %s database %s on %s",
        config.source or 'defaults', len(overrides),
        config.database.type, config.database.name, config.database.host,
    )
    return config

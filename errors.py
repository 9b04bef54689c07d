"""
Errors module.

This module is part of the Mail Admin Panel project.
"""

# errors.py
from typing import Any, Dict, Optional


class ConfigError(Exception):
    """Base class for configuration defects."""

    def __init__(self, message: str, setting: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.setting = setting
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(ConfigError):
    """The configuration cannot be used at all (gate closed, unreadable source)."""


class InvalidValueError(ConfigError, ValueError):
    """A setting holds a value outside its declared type or range."""

    def __init__(self, message: str, setting: Optional[str] = None, value: Any = None):
        super().__init__(message, setting, {'value': value})
        self.value = value


class InvalidDefaultError(InvalidValueError):
    """A default setting names a value missing from its option list."""

    def __init__(self, setting: str, value: Any, options_setting: str, options):
        super().__init__(
            f"Setting '{setting}' is {value!r}, which is not one of "
            f"'{options_setting}': {', '.join(options) or '(empty)'}",
            setting,
            value,
        )
        self.details['options'] = list(options)


class MissingDependentKeyError(InvalidValueError):
    """A primary setting is present but one of its required dependents is not."""

    def __init__(self, primary: str, missing: str):
        super().__init__(
            f"Setting '{primary}' is defined, so '{missing}' must also be defined",
            missing,
        )
        self.primary = primary
        self.details['primary'] = primary


class UnknownKeyError(ConfigError, LookupError):
    """A key that was never declared was requested or supplied."""

    def __init__(self, key: str):
        super().__init__(f"Unknown setting '{key}'", key)

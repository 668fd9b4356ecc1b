# -*- coding: utf-8 -*-
"""
Coercion
~~~~~~~~

Conversion of signed Facebook fields into Python values.

Known fields are enumerated by :class:`VendorField`, each backed by an odin
field that performs the conversion. Fields not in the enumeration are passed
through as the raw string.

"""
import datetime
import enum

from odin.exceptions import ValidationError
from odin.fields import Field

# Typing imports
from typing import Any, Dict, Mapping, Optional  # noqa

__all__ = ('FlagField', 'TimestampField', 'IdListField', 'VendorField', 'coerce', 'coerce_fields')


class FlagField(Field):
    """
    A flag; only the value "1" is considered set.
    """
    def to_python(self, value):
        return value == '1'


class TimestampField(Field):
    """
    Seconds since the epoch (may be fractional) converted into a UTC datetime.

    A value of "0" means no time has been provided.
    """
    def to_python(self, value):
        if value is None or value == '0':
            return None
        try:
            seconds = float(value)
            return datetime.datetime.fromtimestamp(seconds, tz=datetime.timezone.utc)
        except (ValueError, OverflowError, OSError):
            raise ValidationError("Invalid timestamp value.")


class IdListField(Field):
    """
    Comma separated list of identifiers.
    """
    def to_python(self, value):
        if not value:
            return []
        return value.split(',')


class VendorField(enum.Enum):
    """
    Signed fields with a known type.
    """
    def __new__(cls, field_name, odin_field):
        obj = object.__new__(cls)
        obj._value_ = field_name  # noqa
        obj.odin_field = odin_field
        return obj

    Added = 'added', FlagField()
    InCanvas = 'in_canvas', FlagField()
    InNewFacebook = 'in_new_facebook', FlagField()
    PositionFix = 'position_fix', FlagField()
    PageAdded = 'page_added', FlagField()
    InProfileTab = 'in_profile_tab', FlagField()
    LoggedOutFacebook = 'logged_out_facebook', FlagField()
    Expires = 'expires', TimestampField(null=True)
    ProfileUpdateTime = 'profile_update_time', TimestampField(null=True)
    Time = 'time', TimestampField(null=True)
    Friends = 'friends', IdListField(null=True)

    def clean(self, value):
        # type: (str) -> Any
        return self.odin_field.clean(value)


def coerce(name, value):
    # type: (str, str) -> Optional[Any]
    """
    Coerce a single signed field into a Python value.

    Returns `None` if the field has no value (eg a timestamp of "0") or the
    value could not be parsed.

    """
    try:
        field = VendorField(name)
    except ValueError:
        return value

    try:
        return field.clean(value)
    except ValidationError:
        return None


def coerce_fields(fields):
    # type: (Mapping[str, str]) -> Dict[str, Any]
    """
    Coerce a set of signed fields, fields without a value are omitted.
    """
    result = {}
    for name, value in fields.items():
        value = coerce(name, value)
        if value is not None:
            result[name] = value
    return result

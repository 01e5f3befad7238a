"""
Documents are plain `dict`s whose values belong to a closed set of kinds.

`ValueKind` is that set: every value that may travel through the Codec and the
handlers is classified by `kind_of()`, and anything else is rejected.
Field order is the `dict` insertion order.
"""

import uuid
from datetime import datetime
from enum import Enum

from bson.binary import Binary
from bson.code import Code
from bson.dbref import DBRef
from bson.decimal128 import Decimal128
from bson.max_key import MaxKey
from bson.min_key import MinKey
from bson.objectid import ObjectId
from bson.regex import Regex
from bson.timestamp import Timestamp

from typing import Any, Mapping


class ValueKind(Enum):
    """ The kind of a document value """
    NULL = 'null'
    BOOLEAN = 'boolean'
    INTEGER = 'integer'
    DOUBLE = 'double'
    STRING = 'string'
    IDENTIFIER = 'identifier'
    DATETIME = 'datetime'
    DOCUMENT = 'document'
    ARRAY = 'array'
    #: Other BSON types that plain JSON can't express: Decimal128, Binary (and bytes), UUID, Regex, Timestamp, etc
    EXTENDED = 'extended'


#: The store keeps integers as int64
INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


# Order matters: `bool` is a subclass of `int`, `Int64` is a subclass of `int`
_KIND_BY_TYPE = (
    (bool, ValueKind.BOOLEAN),
    (int, ValueKind.INTEGER),
    (float, ValueKind.DOUBLE),
    (str, ValueKind.STRING),
    (ObjectId, ValueKind.IDENTIFIER),
    (datetime, ValueKind.DATETIME),
    (Mapping, ValueKind.DOCUMENT),
    (list, ValueKind.ARRAY),
    ((Decimal128, Binary, bytes, uuid.UUID, Regex, Timestamp, MinKey, MaxKey, Code, DBRef), ValueKind.EXTENDED),
)


def kind_of(value: Any) -> ValueKind:
    """ Classify a document value

        :raises TypeError: the value does not belong to any kind
    """
    if value is None:
        return ValueKind.NULL

    for types, kind in _KIND_BY_TYPE:
        if isinstance(value, types):
            if kind is ValueKind.INTEGER and not INT64_MIN <= value <= INT64_MAX:
                raise TypeError('Integer out of the 64-bit range: {}'.format(value))
            return kind

    raise TypeError('Unsupported value type: {}'.format(type(value).__name__))


def is_operator_expression(value: Any) -> bool:
    """ Is the value an operator expression, e.g. { $gte: 18 } ?

        A document with at least one "$"-prefixed key is an operator expression, not a nested object.
    """
    return isinstance(value, Mapping) and any(isinstance(k, str) and k.startswith('$') for k in value)


def validate_document(document: Mapping, path: str = '') -> Mapping:
    """ Walk a document and make sure every value has a known kind

        :raises TypeError: unsupported value, with the path to it
    """
    for name, value in document.items():
        if not isinstance(name, str):
            raise TypeError('Field names must be strings, got {!r} at {!r}'.format(name, path or '<root>'))
        field_path = name if not path else path + '.' + name
        _validate_value(value, field_path)
    return document


def _validate_value(value: Any, path: str):
    try:
        kind = kind_of(value)
    except TypeError as e:
        raise TypeError('{} at {!r}'.format(e, path)) from e

    if kind is ValueKind.DOCUMENT:
        validate_document(value, path)
    elif kind is ValueKind.ARRAY:
        for i, item in enumerate(value):
            _validate_value(item, '{}.{}'.format(path, i))

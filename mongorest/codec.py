"""
### Document Codec
Converts between the JSON wire format and BSON-typed Python documents.

MongoRest speaks [Relaxed Extended JSON](https://github.com/mongodb/specifications/blob/master/source/extended-json.rst):
plain JSON values are kept as they are, and the types that JSON can't express are wrapped:

```javascript
{
    _id: { $oid: '5f43a1b2c3d4e5f6a7b8c9d0' },  // ObjectId
    created: { $date: '2024-01-02T03:04:05Z' },  // date
    price: { $numberDecimal: '9.99' },  // Decimal128
    count: 1,  // integer
    ratio: 1.0,  // double: stays a double
}
```

Canonical Extended JSON (e.g. `{ $numberLong: '1' }`) is accepted on input as well.
"""

from datetime import timezone

from bson import json_util
from bson.binary import UuidRepresentation
from bson.errors import BSONError
from bson.json_util import JSONOptions, JSONMode

from .document import validate_document
from .exc import MalformedInput

from typing import Any, List, Mapping, Tuple, Union


#: Options for every conversion: documents are dicts (insertion-ordered), dates are UTC-aware
JSON_OPTIONS = JSONOptions(
    json_mode=JSONMode.RELAXED,
    document_class=dict,
    tz_aware=True,
    tzinfo=timezone.utc,
    uuid_representation=UuidRepresentation.STANDARD,
)


def _loads(data: Union[bytes, str]) -> Any:
    """ Parse JSON text with extended types

        :raises MalformedInput
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            data = data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedInput('body is not valid UTF-8: {}'.format(e)) from e

    if not data or not data.strip():
        raise MalformedInput('body is empty')

    try:
        return json_util.loads(data, json_options=JSON_OPTIONS)
    except (ValueError, TypeError, KeyError, BSONError) as e:
        # ValueError: invalid JSON (JSONDecodeError), or an invalid extended type wrapper
        # BSONError: e.g. InvalidId for { $oid: 'xyz' }
        raise MalformedInput(str(e)) from e


def decode(data: Union[bytes, str]) -> dict:
    """ Decode a JSON object into a document

        :raises MalformedInput: invalid JSON, or not an object
    """
    document = _loads(data)
    if not isinstance(document, Mapping):
        raise MalformedInput('expected a JSON object, got {}'.format(_json_type_name(document)))
    return document


def decode_many(data: Union[bytes, str]) -> List[dict]:
    """ Decode a JSON array of objects into a list of documents

        :raises MalformedInput: invalid JSON, not an array, or some items are not objects
    """
    documents = _loads(data)
    if not isinstance(documents, list):
        raise MalformedInput('expected a JSON array, got {}'.format(_json_type_name(documents)))
    for i, document in enumerate(documents):
        if not isinstance(document, Mapping):
            raise MalformedInput('item #{} must be a JSON object, got {}'.format(i, _json_type_name(document)))
    return documents


def decode_update_request(data: Union[bytes, str]) -> Tuple[dict, dict]:
    """ Decode an update request: { filter: {...}, update: {...} }

        A missing (or null) filter means "everything".

        :return: (filter, update)
        :raises MalformedInput
    """
    body = decode(data)

    criteria = body.get('filter')
    if criteria is None:
        criteria = {}
    if not isinstance(criteria, Mapping):
        raise MalformedInput('"filter" must be an object, got {}'.format(_json_type_name(criteria)))

    update = body.get('update')
    if not isinstance(update, Mapping):
        raise MalformedInput('"update" must be an object, got {}'.format(_json_type_name(update)))

    return criteria, update


def encode(value: Any) -> bytes:
    """ Encode a document, a list of documents, or a scalar as JSON

        :raises MalformedInput: a value that has no JSON representation
    """
    try:
        if isinstance(value, Mapping):
            validate_document(value)
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, Mapping):
                    validate_document(item)
        return json_util.dumps(value, json_options=JSON_OPTIONS).encode('utf-8')
    except TypeError as e:
        raise MalformedInput(str(e)) from e


def _json_type_name(value: Any) -> str:
    """ Name the JSON type of a decoded value, for error messages """
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, list):
        return 'array'
    if isinstance(value, Mapping):
        return 'object'
    return type(value).__name__

"""
### Filter Operation
Filtering selects the documents that an operation applies to: read, update, delete, and count all use it.

A filter may be written with dotted paths, with nested objects, or with both.
Before it is given to the store, it is normalized into the flat form that MongoDB expects:

```javascript
// Nested objects are flattened into dotted paths
{ address: { city: 'Paris', zip: '75001' } }
// -> { 'address.city': 'Paris', 'address.zip': '75001' }

// Operator expressions are leaves: they are never flattened
{ profile: { age: { $gte: 18 } } }
// -> { 'profile.age': { $gte: 18 } }

// An array means: "the array field contains at least one of these values"
{ tags: ['x', 'y'] }
// -> { tags: { $elemMatch: { $in: ['x', 'y'] } } }
```

An array is never matched by plain equality. If you really need to compare the whole array,
use the `$eq` operator: `{ tags: { $eq: ['x', 'y'] } }`.

#### Top-level operators
The following boolean operators receive a list of filters; every one of them is normalized as well:

* `{ $or: [ {..criteria..}, .. ] }` - any is true
* `{ $and: [ {..criteria..}, .. ] }` - all are true
* `{ $nor: [ {..criteria..}, .. ] }` - none is true

Any other top-level operator (`$expr`, `$text`, ...) is passed to the store as it is.

An empty filter, `{}`, or `null`, matches all documents.
"""

from .base import MongoRestHandlerBase
from ..document import is_operator_expression
from ..exc import InvalidArgument

from typing import Any, Mapping


#: The native operator for "an array field has an element that matches"
ELEMENT_MATCH = '$elemMatch'


class MongoFilter(MongoRestHandlerBase):
    """ MongoRest filter normalizer.

        Takes a possibly nested filter object, and produces a flat mapping
        from dotted paths to match conditions.

        When the same path is given twice (e.g. {'a.b': 1, a: {b: 2}}), the last one wins.
    """

    request_section_name = 'filter'

    # List of boolean operators, handled by a separate method
    _boolean_operators = frozenset(('$and', '$or', '$nor'))

    def __init__(self):
        super(MongoFilter, self).__init__()

        # On input
        self.conditions = None

    def input(self, criteria):
        super(MongoFilter, self).input(criteria)
        self.conditions = self._normalize_criteria(criteria)
        return self

    def _normalize_criteria(self, criteria):
        """ Normalize a filter into a flat dict

        :type criteria: dict | None
        :rtype: dict
        :raises InvalidArgument
        """
        # None
        if criteria is None:
            criteria = {}

        # Validation base
        if not isinstance(criteria, Mapping):
            raise InvalidArgument('Filter criteria must be one of: null, object')

        flat = {}
        for key, value in criteria.items():
            if key.startswith('$'):
                flat[key] = self._normalize_top_level_operator(key, value)
            else:
                self._flatten_into(flat, key, value)
        return flat

    def _flatten_into(self, flat: dict, path: str, value: Any):
        """ Depth-first: write the conditions for `value` found at `path` into `flat` """
        # { age: { $gte: 18 } }: a leaf
        if is_operator_expression(value):
            flat[path] = value
        # { address: { city: .. } }: recurse
        elif isinstance(value, Mapping):
            # { address: {} } would otherwise vanish; keep it as an equality with an empty document
            if not value:
                flat[path] = {'$eq': {}}
            for name, nested_value in value.items():
                self._flatten_into(flat, path + '.' + name, nested_value)
        # { tags: [..] }: element match
        elif isinstance(value, list):
            flat[path] = self.element_match(value)
        # scalar
        else:
            flat[path] = value

    def _normalize_top_level_operator(self, op: str, value: Any):
        """ Handle a "$"-prefixed key found at the top level

            Example:
                Input: { $or: [ {}, ... ] }
                -> _normalize_top_level_operator('$or', [ {}, ... ])
        """
        # Other operators are not ours to interpret
        if op not in self._boolean_operators:
            return value

        # Validate it's a list
        if not isinstance(value, (list, tuple)):
            raise InvalidArgument('{}: {} argument must be a list'
                                  .format(self.request_section_name, op))

        # Every item is a filter itself: recurse.
        # Note that we never validate the items, because _normalize_criteria() will do it for us.
        return [self._normalize_criteria(c) for c in value]

    @staticmethod
    def element_match(values: list) -> dict:
        """ Build a condition: "the array field has at least one element equal to one of `values`" """
        return {ELEMENT_MATCH: {'$in': list(values)}}

    def compile_statement(self) -> dict:
        """ Get the normalized filter. An empty dict matches everything. """
        return self.conditions


def normalize_filter(criteria) -> dict:
    """ Normalize a filter into a flat dict of dotted paths

        :type criteria: dict | None
        :raises InvalidArgument
    """
    return MongoFilter().input(criteria).compile_statement()
